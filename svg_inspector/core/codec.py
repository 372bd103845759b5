from __future__ import annotations

"""Markup parser/serializer bridging document text and :class:`Tree`.

Text is parsed with lxml and converted into owned :class:`Node` objects; on the
way back the nodes are rebuilt as lxml elements and serialized.  Attribute order,
namespace prefixes, comments and processing instructions survive the round
trip.  Non-element content is stored as :class:`Misc` items beside the element
children, so child indexes only count elements.

Attribute names are stored in Clark notation (``{uri}local``).  Front-ends
show and accept qualified names (``xlink:href``); :func:`qualified_name` and
:func:`resolve_attribute_name` convert between the two against the
namespaces in scope on a node.
"""

import logging
import re
from typing import List, Optional

from lxml import etree as ET  # type: ignore

from .exceptions import InvalidOperation, ParseError
from .models import Misc, Node, Tree
from .utils import local_name, namespace_of

__all__ = [
    "parse_svg",
    "serialize_svg",
    "new_element",
    "qualified_name",
    "resolve_attribute_name",
    "check_attribute",
    "SVG_NAMESPACE",
    "XML_NAMESPACE",
]

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

_DECLARATION_RE = re.compile(r"^\s*(<\?xml\b[^>]*\?>)")
# Internal subsets may contain '>' so the bracketed part is matched separately
_DOCTYPE_RE = re.compile(r"<!DOCTYPE\s[^\[>]*(?:\[.*?\]\s*)?>", re.S)


def _make_parser(resolve_entities: bool = False, huge_tree: bool = False) -> ET.XMLParser:
    return ET.XMLParser(
        resolve_entities=resolve_entities,  # Security: entity resolution off by default
        no_network=True,
        encoding="utf-8",
        huge_tree=huge_tree,
        remove_blank_text=False,
        remove_comments=False,
        remove_pis=False,
    )


def parse_svg(text: str, *, resolve_entities: bool = False, huge_tree: bool = False) -> Tree:
    """Parse *text* into a new :class:`Tree`.

    Raises
    ------
    ParseError
        If the text is empty or not well-formed markup.
    """
    if text is None or not text.strip():
        raise ParseError("Document is empty")

    declaration_match = _DECLARATION_RE.match(text)
    parser = _make_parser(resolve_entities=resolve_entities, huge_tree=huge_tree)
    try:
        # lxml rejects str input carrying an encoding declaration; the parser
        # is pinned to utf-8 so a stale declared encoding is ignored
        root_el = ET.fromstring(text.encode("utf-8"), parser)
    except ET.XMLSyntaxError as e:
        line, column = (e.position if getattr(e, "position", None) else (None, None))
        raise ParseError(f"XML syntax error: {e.msg}", line=line, column=column, cause=e) from e
    except (ValueError, UnicodeError) as e:
        raise ParseError(f"Invalid document text: {e}", cause=e) from e

    if root_el is None:
        raise ParseError("Document has no root element")

    doctype = None
    if root_el.getroottree().docinfo.doctype:
        # docinfo drops the internal subset, which entity references still need
        doctype_match = _DOCTYPE_RE.search(text)
        doctype = doctype_match.group(0) if doctype_match else root_el.getroottree().docinfo.doctype

    root = _to_node(root_el, None)
    prolog = [_to_misc(sib) for sib in reversed(list(root_el.itersiblings(preceding=True)))]
    epilog = [_to_misc(sib) for sib in root_el.itersiblings()]
    for misc in prolog + epilog:
        misc.tail = None  # whitespace outside the root is not kept by the parser
    declaration = declaration_match.group(1) if declaration_match else None
    logger.debug("Parse: root=%s nodes=%d misc=%d", root.label(),
                 sum(1 for _ in root.iter()), len(prolog) + len(epilog))
    return Tree(root, doctype=doctype, declaration=declaration, prolog=prolog, epilog=epilog)


def _to_misc(element) -> Misc:
    if isinstance(element, ET._Comment):
        return Misc("comment", text=element.text, tail=element.tail)
    if isinstance(element, ET._ProcessingInstruction):
        return Misc("pi", text=element.text, target=element.target, tail=element.tail)
    # unresolved entity reference
    return Misc("entity", target=element.name, tail=element.tail)


def _to_node(element: ET._Element, parent: Optional[ET._Element]) -> Node:
    inherited = parent.nsmap if parent is not None else {}
    own_nsmap = {
        prefix: uri for prefix, uri in element.nsmap.items()
        if inherited.get(prefix) != uri
    }
    leading: List[Misc] = []
    children: List[Node] = []
    for child in element:
        if not isinstance(child.tag, str):
            misc = _to_misc(child)
            if children:
                children[-1].trailing.append(misc)
            else:
                leading.append(misc)
            continue
        children.append(_to_node(child, element))
    return Node(
        tag=element.tag,
        attributes=dict(element.attrib),
        children=children,
        text=element.text,
        tail=element.tail,
        nsmap=own_nsmap,
        leading=leading,
    )


def serialize_svg(tree: Tree, *, pretty_print: bool = False) -> str:
    """Serialize *tree* back to document text.

    The prologue is written one item per line: declaration, DOCTYPE, then
    prolog comments and processing instructions; epilog items follow the root
    on their own lines.
    """
    root_el = _to_element(tree.root, None)
    parts = []
    if tree.declaration:
        parts.append(tree.declaration)
    if tree.doctype:
        parts.append(tree.doctype)
    parts.extend(_misc_text(m) for m in tree.prolog)
    body = ET.tostring(root_el, encoding="unicode", pretty_print=pretty_print)
    parts.append(body.rstrip("\n") if pretty_print else body)
    parts.extend(_misc_text(m) for m in tree.epilog)
    return "\n".join(parts)


def _misc_element(misc: Misc):
    if misc.kind == "comment":
        element = ET.Comment(misc.text)
    elif misc.kind == "pi":
        element = ET.PI(misc.target, misc.text)
    else:
        element = ET.Entity(misc.target)
    element.tail = misc.tail
    return element


def _misc_text(misc: Misc) -> str:
    element = _misc_element(misc)
    element.tail = None
    return ET.tostring(element, encoding="unicode")


def _to_element(node: Node, parent_el: Optional[ET._Element]) -> ET._Element:
    nsmap = node.nsmap or None
    if parent_el is None:
        element = ET.Element(node.tag, nsmap=nsmap)
    else:
        element = ET.SubElement(parent_el, node.tag, nsmap=nsmap)
    for name, value in node.attributes.items():
        element.set(name, value)
    element.text = node.text
    element.tail = node.tail
    for misc in node.leading:
        element.append(_misc_element(misc))
    for child in node.children:
        _to_element(child, element)
        for misc in child.trailing:
            element.append(_misc_element(misc))
    return element


def new_element(tree: Tree, local: str) -> Node:
    """Create a detached node in the namespace of the document's drawing elements.

    The namespace is the root element's; a document without a namespace gets
    a plain tag.
    """
    namespace = namespace_of(tree.root.tag)
    tag = f"{{{namespace}}}{local}" if namespace else local
    return Node(tag=tag)


# ---------------------------------------------------------------------------
# Attribute names
# ---------------------------------------------------------------------------

def qualified_name(node: Node, name: str) -> str:
    """Return the ``prefix:local`` form of attribute *name* on *node*.

    Names without a namespace are returned unchanged, as are namespaced names
    whose URI has no prefix in scope.
    """
    uri = namespace_of(name)
    if uri is None:
        return name
    if uri == XML_NAMESPACE:
        return f"xml:{local_name(name)}"
    for prefix, scoped_uri in node.in_scope_nsmap().items():
        if prefix and scoped_uri == uri:
            return f"{prefix}:{local_name(name)}"
    return name


def resolve_attribute_name(node: Node, name: str) -> str:
    """Turn a qualified (or Clark) attribute *name* into the stored Clark form.

    Unprefixed names stay in no namespace; the default namespace never applies
    to attributes.

    Raises
    ------
    InvalidOperation
        If the prefix is not declared in scope or the name is not a valid
        XML attribute name.
    """
    name = (name or "").strip()
    if not name:
        raise InvalidOperation("Attribute name is required.")
    if name.startswith("{"):
        resolved = name
    elif ":" in name:
        prefix, _, local = name.partition(":")
        if prefix == "xml":
            uri: Optional[str] = XML_NAMESPACE
        else:
            uri = node.in_scope_nsmap().get(prefix)
        if not uri:
            raise InvalidOperation(f"Unknown namespace prefix '{prefix}' in '{name}'.")
        resolved = f"{{{uri}}}{local}"
    else:
        resolved = name
    check_attribute(resolved, "")
    return resolved


def check_attribute(name: str, value: str) -> None:
    """Validate a Clark-notation attribute *name* and its *value* with lxml.

    Raises
    ------
    InvalidOperation
        If lxml would refuse to serialize the pair.
    """
    try:
        ET.Element("check").set(name, value)
    except (ValueError, TypeError) as exc:
        raise InvalidOperation(str(exc)) from exc
