"""Rich console plumbing for human-readable output.

Renderers draw into an in-memory console and hand back plain text, so
the CLI decides where it goes (stdout or stderr). Rich strips colour on
its own when the console is not attached to a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from relcore.domain.permissions import PermissionLevel

DEFAULT_WIDTH = 120

PERMISSION_STYLES: dict[str, str] = {
    PermissionLevel.VIEW.value: "cyan",
    PermissionLevel.EDIT.value: "yellow",
    PermissionLevel.MANAGE.value: "magenta",
}

REL_THEME = Theme(
    {
        "rel.ok": "bold green",
        "rel.error": "bold red",
        "rel.warning": "bold yellow",
        "rel.op": "bold cyan",
        "rel.key": "dim",
        "rel.id": "bold blue",
        "rel.name": "bold",
        **{f"rel.permission.{level}": colour for level, colour in PERMISSION_STYLES.items()},
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed console writing to a fresh buffer (see :func:`get_output`)."""
    return Console(
        file=StringIO(),
        theme=REL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "console was not created by create_console()"
        raise TypeError(msg)
    return buffer.getvalue()


def style_for_permission(permission: str) -> str:
    """Theme style for a permission level; unknown levels render unstyled."""
    return f"rel.permission.{permission}" if permission in PERMISSION_STYLES else ""
