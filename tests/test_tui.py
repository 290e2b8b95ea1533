import io
from rich.console import Console
from ui import tui

def test_show_result_keeps_bracketed_text(monkeypatch):
    buf = io.StringIO()
    monkeypatch.setattr(tui, "console", Console(file=buf, force_terminal=False, width=200))
    tui.show_result({"content": [{"type": "text", "text": "Das MaStR ist nicht erreichbar: [Errno 111] Connection refused"}],
                     "isError": True})
    assert "[Errno 111] Connection refused" in buf.getvalue()
