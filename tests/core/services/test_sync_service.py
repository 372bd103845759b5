import logging

from svg_inspector.core import protocol
from svg_inspector.core.exceptions import ParseError
from svg_inspector.core.host import MemoryTextHost
from svg_inspector.core.services.sync_service import SyncSession, SyncState


class RecordingTransport:
    """Transport that only records what the session posts."""

    def __init__(self):
        self.messages = []

    def post_message(self, message):
        self.messages.append(dict(message))


def _ids(nodes):
    return [n.attributes.get("id") for n in nodes]


class TestHandshake:

    def test_start_sends_ready_and_receives_initial_load(self, wired_session):
        host, session = wired_session()
        assert host.received[0] == {"type": "ready"}
        assert session.has_document
        assert session.state is SyncState.IDLE
        assert _ids(session.tree.root.children) == ["layer1", "layer2", "t"]

    def test_no_document_before_first_load(self):
        transport = RecordingTransport()
        session = SyncSession(transport)
        session.start()
        assert transport.messages == [protocol.ready_message()]
        assert session.tree is None
        assert session.push() is None
        assert transport.messages == [protocol.ready_message()]

    def test_unknown_and_malformed_messages_are_ignored(self, wired_session):
        host, session = wired_session()
        tree = session.tree
        session.handle_message({"type": "bogus", "svgText": "<svg/>"})
        session.handle_message({"type": "load"})
        session.handle_message({"type": "load", "svgText": 42})
        assert session.tree is tree


class TestPush:

    def test_push_sends_full_text_and_reapplies_echo(self, wired_session, by_id):
        host, session = wired_session()
        rect = by_id(session.tree, "r2")
        session.selection.select(rect)
        rect.attributes["fill"] = "red"

        pushed = session.push()

        assert host.received[-1] == protocol.update_message(pushed)
        assert host.text == pushed
        assert 'fill="red"' in pushed
        # the echoed load replaced the tree; selection follows by path
        assert session.tree.root.children[0].children[1] is session.selection.primary
        assert session.selection.primary is not rect
        assert session.selection.primary.attributes["fill"] == "red"

    def test_echo_is_logged_not_dropped(self, wired_session, caplog):
        host, session = wired_session()
        before = session.tree
        with caplog.at_level(logging.DEBUG, logger="svg_inspector.core.services.sync_service"):
            session.push()
        assert session.tree is not before
        assert "load confirms last push" in caplog.text

    def test_push_skipped_while_applying(self):
        transport = RecordingTransport()
        session = SyncSession(transport)
        session.load("<svg/>")
        session.state = SyncState.APPLYING
        assert session.push() is None
        assert transport.messages == []

    def test_push_without_host_echo_keeps_local_tree(self):
        transport = RecordingTransport()
        session = SyncSession(transport)
        session.load('<svg><rect id="a"/></svg>')
        tree = session.tree
        text = session.push()
        assert text == '<svg><rect id="a"/></svg>'
        assert transport.messages == [protocol.update_message(text)]
        assert session.tree is tree


class TestExternalReload:

    def test_selection_remaps_by_position(self, wired_session, three_shapes_svg):
        host, session = wired_session(three_shapes_svg)
        a, b, c = session.tree.root.children
        session.selection.select(a, multi=True)
        session.selection.select(c, multi=True)

        host.edit('<svg xmlns="http://www.w3.org/2000/svg"><circle id="b"/><path id="c"/></svg>')

        assert _ids(session.selection) == ["b"]
        assert session.selection.primary is session.tree.root.children[0]

    def test_stale_selected_node_does_not_block_reload(self, wired_session, three_shapes_svg):
        host, session = wired_session(three_shapes_svg)
        stale = SyncSession(RecordingTransport())
        stale.load(three_shapes_svg)
        session.selection.select(stale.tree.root.children[0], multi=True)
        session.selection.select(session.tree.root.children[2], multi=True)

        host.edit('<svg xmlns="http://www.w3.org/2000/svg"><rect id="x"/><circle id="y"/><path id="z"/></svg>')

        assert _ids(session.tree.root.children) == ["x", "y", "z"]
        assert _ids(session.selection) == ["z"]
        assert session.last_error is None

    def test_selection_of_only_stale_nodes_empties(self, wired_session, three_shapes_svg):
        host, session = wired_session()
        stale = SyncSession(RecordingTransport())
        stale.load(three_shapes_svg)
        session.selection.select(stale.tree.root.children[0])

        host.edit(three_shapes_svg)

        assert _ids(session.tree.root.children) == ["a", "b", "c"]
        assert len(session.selection) == 0

    def test_parse_failure_clears_document(self, wired_session, by_id):
        host, session = wired_session()
        session.selection.select(by_id(session.tree, "r1"))

        host.edit("<svg><rect></svg>")

        assert session.tree is None
        assert isinstance(session.last_error, ParseError)
        assert len(session.selection) == 0
        assert session.selection.primary is None
        assert session.push() is None

    def test_recovers_on_next_valid_load(self, wired_session, three_shapes_svg):
        host, session = wired_session()
        host.edit("not markup at all")
        assert session.tree is None
        host.edit(three_shapes_svg)
        assert session.last_error is None
        assert _ids(session.tree.root.children) == ["a", "b", "c"]

    def test_listeners_run_after_each_replacement(self, wired_session):
        host, session = wired_session()
        seen = []

        def listener(s):
            seen.append(s.tree)

        session.add_listener(listener)
        host.edit("<svg/>")
        host.edit("<svg")
        assert len(seen) == 2
        assert seen[0] is not None
        assert seen[1] is None

        session.remove_listener(listener)
        session.remove_listener(listener)
        host.edit("<svg/>")
        assert len(seen) == 2

    def test_load_during_load_is_queued(self):
        session = SyncSession(RecordingTransport())
        order = []

        def listener(s):
            order.append(s.tree.root.attributes.get("id"))
            if len(order) == 1:
                s.load('<svg id="second"/>')
                # not applied yet: still draining the first load
                assert s.tree.root.attributes.get("id") == "first"

        session.add_listener(listener)
        session.load('<svg id="first"/>')
        assert order == ["first", "second"]
        assert session.tree.root.attributes.get("id") == "second"

    def test_push_from_listener_round_trips(self):
        host = MemoryTextHost('<svg><rect id="a"/></svg>')
        session = SyncSession(host)
        host.connect(session.handle_message)
        pushed = []

        def listener(s):
            if not pushed:
                s.tree.root.children[0].attributes["x"] = "1"
                pushed.append(s.push())

        session.add_listener(listener)
        session.start()
        assert host.text == '<svg><rect id="a" x="1"/></svg>'
        assert session.tree.root.children[0].attributes == {"id": "a", "x": "1"}


class TestMiscContent:

    def test_comments_survive_a_push(self, wired_session, xlink_svg):
        host, session = wired_session(xlink_svg)
        session.tree.root.children[0].attributes["fill"] = "red"
        session.push()
        assert "<!-- logo -->" in host.text
        assert host.text.endswith('<!-- logo --><rect id="a" fill="red"/><use id="u" xlink:href="#a"/></svg>')

    def test_prolog_comment_survives_a_push(self, wired_session):
        host, session = wired_session('<!-- made by hand -->\n<svg><rect id="a"/></svg>')
        session.tree.root.children[0].attributes["x"] = "1"
        session.push()
        assert host.text == '<!-- made by hand -->\n<svg><rect id="a" x="1"/></svg>'
