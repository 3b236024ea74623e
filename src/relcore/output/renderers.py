"""Human-readable rendering of a ServiceResult.

Successes are drawn by the renderer registered for their ``op`` in
``_OP_RENDERERS`` (plain key/value listing otherwise); failures all share
one error layout. Everything is drawn into a buffered console and returned
as text, uncoloured unless a terminal is attached.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from relcore.output.console import create_console, get_output, style_for_permission

if TYPE_CHECKING:
    from rich.console import Console

    from relcore.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    console = create_console()
    draw = _OP_RENDERERS.get(result.op, _render_generic) if result.ok else _render_error
    draw(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """``--quiet`` output: the new row id when there is one, else a status word."""
    if result.ok:
        new_id = result.data.get("id")
        return f"OK: {result.op}" if new_id is None else str(new_id)
    reason = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {reason}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "rel.ok"), (f"  {result.op}", "rel.op")))


def _value_style(key: str, value: Any) -> str:
    if key == "id" or key.endswith("_id"):
        return "rel.id"
    if key == "permission":
        return style_for_permission(str(value))
    return "rel.name" if key.endswith("name") else ""


def _field(console: Console, key: str, value: Any) -> None:
    """One indented ``key: value`` line; containers are shown as compact JSON."""
    if isinstance(value, (dict, list)):
        shown, style = _json.dumps(value, separators=(",", ":")), ""
    else:
        shown, style = str(value), _value_style(key, value)
    console.print(Text.assemble((f"  {key}: ", "rel.key"), (shown, style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Verbose-only trailer: plain meta keys, then the span tree."""
    if not result.meta:
        return
    console.print()
    for key, value in result.meta.items():
        if key != "telemetry":
            _field(console, key, value)
    spans = result.meta.get("telemetry")
    if spans:
        root = Tree(Text("timings", style="rel.key"), guide_style="dim")
        _add_span(root, spans)
        console.print(root)


# Slow-span thresholds in milliseconds, checked in order.
_TIMING_STYLES = ((1000.0, "bold red"), (100.0, "yellow"))


def _add_span(parent: Tree, span: dict[str, Any]) -> None:
    duration = float(span.get("duration_ms") or 0.0)
    style = next((s for limit, s in _TIMING_STYLES if duration > limit), "dim")
    label = Text.assemble((f"{duration:.2f}ms", style), "  ", str(span.get("name", "?")))
    notes = span.get("annotations") or {}
    if notes:
        label.append("  " + " ".join(f"{k}={v}" for k, v in notes.items()), style="dim")
    node = parent.add(label)
    for child in span.get("children") or ():
        _add_span(node, child)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "rel.error"), (f"  {result.op}", "rel.op"), f" — {msg}"))

    if not err:
        return
    # Field errors are always shown; they are what the caller has to fix.
    for field_name, messages in err.detail.get("fields", {}).items():
        for message in messages:
            console.print(Text.assemble((f"  {field_name}:", "rel.key"), f" {message}"))
    if verbose:
        other = {k: v for k, v in err.detail.items() if k != "fields"}
        if other:
            console.print(Text("  detail:", style="dim"))
            for k, v in other.items():
                console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_entity(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update results: the entity's fields, id first."""
    _status_line(console, result)
    data = result.data
    if "id" in data:
        _field(console, "id", data["id"])
    for key, value in data.items():
        if key == "id" or value is None:
            continue
        if not verbose and key in ("created_at", "updated_at"):
            continue
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_membership(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render vault access grants and changes as a one-row table."""
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Vault", style="rel.id", no_wrap=True)
    table.add_column("User", style="rel.id", no_wrap=True)
    table.add_column("Permission")
    permission = str(result.data.get("permission", ""))
    table.add_row(
        str(result.data.get("vault_id", "")),
        str(result.data.get("user_id", "")),
        Text(permission, style=style_for_permission(permission)),
    )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_user_destroyed(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    destroyed = result.data.get("destroyed_vault_ids", [])
    if destroyed:
        _field(console, "destroyed_vaults", ", ".join(str(v) for v in destroyed))
    else:
        _field(console, "destroyed_vaults", "none")
    if verbose:
        _render_meta(console, result)


def _render_drain(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "replayed", result.data.get("replayed", 0))
    _field(console, "dead_letter", result.data.get("dead_letter", 0))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Registration
    "account_registered": _render_entity,
    "user_added": _render_entity,
    # Users
    "user_destroyed": _render_user_destroyed,
    # Vaults
    "vault_created": _render_entity,
    "vault_updated": _render_entity,
    "vault_access_granted": _render_membership,
    "vault_access_permission_changed": _render_membership,
    # Contacts
    "contact_created": _render_entity,
    "contact_updated": _render_entity,
    "pronoun_set": _render_entity,
    "pronoun_unset": _render_entity,
    "contact_information_created": _render_entity,
    "contact_information_updated": _render_entity,
    # Reference data
    "pronoun_created": _render_entity,
    "contact_information_type_created": _render_entity,
    # Events
    "events_drain": _render_drain,
}
