from svg_inspector.core import protocol
from svg_inspector.core.host import FileTextHost, MemoryTextHost


class TestMemoryTextHost:

    def test_ready_is_answered_with_load(self):
        host = MemoryTextHost("<svg/>")
        inbox = []
        host.connect(inbox.append)
        host.post_message(protocol.ready_message())
        assert inbox == [{"type": "load", "svgText": "<svg/>"}]

    def test_update_replaces_buffer_and_echoes(self):
        host = MemoryTextHost("<svg/>")
        inbox = []
        host.connect(inbox.append)
        host.post_message(protocol.update_message('<svg id="x"/>'))
        assert host.text == '<svg id="x"/>'
        assert inbox == [protocol.load_message('<svg id="x"/>')]

    def test_update_without_text_is_ignored(self):
        host = MemoryTextHost("<svg/>")
        host.post_message({"type": "updateSvg"})
        assert host.text == "<svg/>"
        assert host.sent == []

    def test_edit_emits_load(self):
        host = MemoryTextHost()
        inbox = []
        host.connect(inbox.append)
        host.edit("<svg/>")
        assert inbox == [protocol.load_message("<svg/>")]

    def test_without_client_messages_are_recorded_only(self):
        host = MemoryTextHost("<svg/>")
        host.post_message(protocol.ready_message())
        assert host.sent == [protocol.load_message("<svg/>")]


class TestFileTextHost:

    def test_update_writes_file(self, tmp_path):
        path = tmp_path / "drawing.svg"
        path.write_text("<svg/>", encoding="utf-8")
        host = FileTextHost(path)
        host.post_message(protocol.update_message('<svg id="x"/>'))
        assert path.read_text(encoding="utf-8") == '<svg id="x"/>'

    def test_reload_emits_only_on_change(self, tmp_path):
        path = tmp_path / "drawing.svg"
        path.write_text("<svg/>", encoding="utf-8")
        host = FileTextHost(str(path))
        inbox = []
        host.connect(inbox.append)
        assert host.reload() is False
        path.write_text('<svg id="y"/>', encoding="utf-8")
        assert host.reload() is True
        assert inbox == [protocol.load_message('<svg id="y"/>')]
