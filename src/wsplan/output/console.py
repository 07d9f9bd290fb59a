"""Rich console factory for rendering results into strings.

Renderers print into an in-memory console and the caller collects the
text, so ``format_result`` stays a pure ``ServiceResult -> str`` function.
A StringIO target is never a terminal, which makes Rich drop color codes
for pipes and CliRunner alike.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

# ``ws.*`` style names used by the renderers.
WSPLAN_THEME = Theme(
    {
        "ws.ok": "bold green",
        "ws.error": "bold red",
        "ws.warning": "yellow",
        "ws.op": "cyan",
        "ws.key": "dim",
        "ws.project": "bold",
        "ws.batch": "bold magenta",
        "ws.path": "blue",
    }
)

DEFAULT_WIDTH = 120


def create_console(*, width: int | None = None) -> Console:
    """New buffered console; *width* pins line wrapping (default 120 columns)."""
    return Console(
        file=StringIO(),
        theme=WSPLAN_THEME,
        highlight=False,
        soft_wrap=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything printed to a console from :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "console was not created by create_console()"
        raise TypeError(msg)
    return buffer.getvalue()
