"""Shared fixtures for the SVG Inspector test-suite.

Provides document factories, a wired host/session pair and isolation of the
user configuration directory so no test touches the real home directory.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

lxml = pytest.importorskip("lxml")

from svg_inspector.config import ConfigManager
from svg_inspector.core.codec import parse_svg, serialize_svg
from svg_inspector.core.host import MemoryTextHost
from svg_inspector.core.services import SyncSession

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

SVG_NS = "http://www.w3.org/2000/svg"

THREE_SHAPES = (
    '<svg xmlns="http://www.w3.org/2000/svg">'
    '<rect id="a"/><circle id="b"/><path id="c"/>'
    '</svg>'
)

NESTED = (
    '<svg xmlns="http://www.w3.org/2000/svg">'
    '<g id="layer1"><rect id="r1"/><rect id="r2"/></g>'
    '<g id="layer2"><circle id="c1"/></g>'
    '<text id="t">Hello</text>'
    '</svg>'
)

XLINK = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
    '<!-- logo -->'
    '<rect id="a"/><use id="u" xlink:href="#a"/>'
    '</svg>'
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user config at a temp dir and drop the cached ConfigManager."""
    monkeypatch.setenv("SVG_INSPECTOR_CONFIG_DIR", str(tmp_path / "user_config"))
    monkeypatch.setenv("SVG_INSPECTOR_LOG_DIR", str(tmp_path / "logs"))
    ConfigManager.reset()
    yield
    ConfigManager.reset()


@pytest.fixture
def three_shapes_svg():
    return THREE_SHAPES


@pytest.fixture
def nested_svg():
    return NESTED


@pytest.fixture
def xlink_svg():
    """Document with a prefixed namespace and a comment before the first shape."""
    return XLINK


@pytest.fixture
def make_tree():
    def factory(text: str = NESTED):
        return parse_svg(text)
    return factory


@pytest.fixture
def as_text():
    return serialize_svg


@pytest.fixture
def by_id():
    """Find a node by its ``id`` attribute in a tree."""
    def finder(tree, node_id):
        for node in tree.iter():
            if node.attributes.get("id") == node_id:
                return node
        return None
    return finder


@pytest.fixture
def wired_session():
    """A MemoryTextHost and SyncSession connected to each other and started."""
    def factory(text: str = NESTED):
        host = MemoryTextHost(text)
        session = SyncSession(host)
        host.connect(session.handle_message)
        session.start()
        return host, session
    return factory
