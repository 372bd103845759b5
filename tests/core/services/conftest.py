import pytest

from svg_inspector.core.codec import parse_svg
from svg_inspector.core.services.mutation_service import MutationService


@pytest.fixture
def mutation_service():
    return MutationService()


@pytest.fixture
def shapes_tree(three_shapes_svg):
    """Flat document ``svg > rect#a, circle#b, path#c``."""
    return parse_svg(three_shapes_svg)


@pytest.fixture
def ids():
    """Child ids of a node, in document order."""
    def lister(node):
        return [child.attributes.get("id") for child in node.children]
    return lister
