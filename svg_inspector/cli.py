"""Command-line front-end.

Opens an SVG file through :class:`FileTextHost`, runs one inspection or edit
command and, for edits, writes the document back through the normal sync push.

Examples::

    svg-inspector tree drawing.svg
    svg-inspector attrs drawing.svg 0/1
    svg-inspector set-attr drawing.svg 0/1 fill red
    svg-inspector reorder-attr drawing.svg 0/1 fill id --position before
    svg-inspector move drawing.svg --source 2 --target 0 --position before
    svg-inspector group drawing.svg 0 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from svg_inspector.controllers import InspectorController
from svg_inspector.core.codec import qualified_name
from svg_inspector.core.host import FileTextHost
from svg_inspector.core.models import Node
from svg_inspector.core.paths import Path, format_path, parse_path, resolve_path
from svg_inspector.core.services import OperationResult, SyncSession
from svg_inspector.core.services.mutation_service import MOVE_POSITIONS
from svg_inspector.core.settings import load_editor_settings
from svg_inspector.core.styles import StyleBlock

__all__ = ["main", "build_parser"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOOP = 1
EXIT_ERROR = 2

REORDER_POSITIONS = ("before", "after")


def _path_arg(value: str) -> Path:
    try:
        return parse_path(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="svg-inspector", description="Inspect and edit SVG layers.")
    parser.add_argument("--no-logging-setup", action="store_true",
                        help="Do not configure logging from the config files.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("tree", help="Print the layer tree with paths.")
    p.add_argument("file")

    p = sub.add_parser("attrs", help="Print the attributes of a layer.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)

    p = sub.add_parser("set-attr", help="Set an attribute.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)
    p.add_argument("name")
    p.add_argument("value")

    p = sub.add_parser("del-attr", help="Delete an attribute.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)
    p.add_argument("name")

    p = sub.add_parser("set-style", help="Set an inline style property.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)
    p.add_argument("name")
    p.add_argument("value")

    p = sub.add_parser("del-style", help="Delete an inline style property.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)
    p.add_argument("name")

    p = sub.add_parser("reorder-attr", help="Move an attribute before/after another one.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)
    p.add_argument("dragged")
    p.add_argument("target")
    p.add_argument("--position", choices=REORDER_POSITIONS, required=True)

    p = sub.add_parser("reorder-style", help="Move a style property before/after another one.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)
    p.add_argument("dragged")
    p.add_argument("target")
    p.add_argument("--position", choices=REORDER_POSITIONS, required=True)

    p = sub.add_parser("toggle", help="Toggle the visibility of a layer.")
    p.add_argument("file")
    p.add_argument("path", type=_path_arg)

    p = sub.add_parser("move", help="Move layers before/after/inside a target.")
    p.add_argument("file")
    p.add_argument("--source", dest="sources", action="append", type=_path_arg, required=True)
    p.add_argument("--target", type=_path_arg, required=True)
    p.add_argument("--position", choices=MOVE_POSITIONS, required=True)

    p = sub.add_parser("group", help="Group sibling layers into a new container.")
    p.add_argument("file")
    p.add_argument("paths", nargs="+", type=_path_arg)

    return parser


def _print_tree(node: Node, path: Path, out) -> None:
    hidden = "" if node.is_visible else "  (hidden)"
    print(f"{'  ' * len(path)}{node.label()}  [{format_path(path)}]{hidden}", file=out)
    for i, child in enumerate(node.children):
        _print_tree(child, path + (i,), out)


def _print_attributes(node: Node, out) -> None:
    for name, value in node.attributes.items():
        if name == "style":
            print("style:", file=out)
            for prop, prop_value in StyleBlock.parse(value):
                print(f"  {prop}: {prop_value}", file=out)
        else:
            print(f"{qualified_name(node, name)}={value}", file=out)


def _report(result: OperationResult, out) -> int:
    print(result.message, file=out)
    return EXIT_OK if result.success else EXIT_NOOP


def main(argv: Optional[Sequence[str]] = None, out=None) -> int:
    out = out or sys.stdout
    args = build_parser().parse_args(argv)

    if not args.no_logging_setup:
        from svg_inspector.logging_config import setup_logging
        setup_logging()

    settings = load_editor_settings()
    try:
        host = FileTextHost(args.file)
    except OSError as exc:
        print(f"Cannot read {args.file}: {exc}", file=sys.stderr)
        return EXIT_ERROR

    session = SyncSession(host, settings=settings)
    host.connect(session.handle_message)
    session.start()
    if session.tree is None:
        print(f"Cannot parse {args.file}: {session.last_error}", file=sys.stderr)
        return EXIT_ERROR

    controller = InspectorController(session, settings=settings)
    root = session.tree.root

    def node_at(path: Path) -> Optional[Node]:
        node = resolve_path(root, path)
        if node is None:
            print(f"No layer at path {format_path(path)}", file=sys.stderr)
        return node

    if args.command == "tree":
        _print_tree(root, (), out)
        return EXIT_OK

    if args.command in ("move", "group"):
        paths: List[Path] = args.sources if args.command == "move" else args.paths
        nodes = [node_at(p) for p in paths]
        if any(n is None for n in nodes):
            return EXIT_ERROR
        if args.command == "group":
            controller.session.selection.set(nodes)
            return _report(controller.group_selection(), out)
        target = node_at(args.target)
        if target is None:
            return EXIT_ERROR
        return _report(controller.move(nodes, target, args.position), out)

    node = node_at(args.path)
    if node is None:
        return EXIT_ERROR
    if args.command == "attrs":
        _print_attributes(node, out)
        return EXIT_OK
    if args.command == "toggle":
        return _report(controller.toggle_visibility(node), out)

    controller.select(node)
    if args.command == "set-attr":
        return _report(controller.set_attribute(args.name, args.value), out)
    if args.command == "del-attr":
        return _report(controller.delete_attribute(args.name), out)
    if args.command == "set-style":
        return _report(controller.set_style_property(args.name, args.value), out)
    if args.command == "del-style":
        return _report(controller.delete_style_property(args.name), out)
    if args.command == "reorder-attr":
        return _report(controller.reorder_attribute(args.dragged, args.target, args.position), out)
    if args.command == "reorder-style":
        return _report(controller.reorder_style_property(args.dragged, args.target, args.position), out)

    logger.error("Unhandled command %s", args.command)
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
