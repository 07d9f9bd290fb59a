"""Human-readable rendering of service results.

:func:`render_result` picks a renderer by ``result.op`` (plans become a
batch table, closures a build-ordered chain) and falls back to a plain
key/value listing for anything else. :func:`render_quiet` is the
``--quiet`` form: bare names that shell loops can consume.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from wsplan.output.console import create_console, get_output
from wsplan.services.result import ErrorCode

if TYPE_CHECKING:
    from rich.console import Console

    from wsplan.services.result import ServiceResult

type _Renderer = Callable[[ServiceResult, Console, bool], None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* with Rich and return the text.

    Output carries no ANSI codes unless the console is a terminal, which a
    buffered console never is.
    """
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console, verbose)
        if verbose and result.meta:
            _render_meta(result.meta, console)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: one name per line.

    Plan batches are separated by a blank line, so ``awk -v RS=`` reads one
    batch per record.
    """
    if not result.ok:
        message = result.error.message if result.error else "unknown error"
        return f"ERROR: {result.op} — {message}"

    if result.op == "plan":
        batches = result.data.get("batches", [])
        return "\n\n".join("\n".join(batch["projects"]) for batch in batches)

    items = result.data.get("items")
    if isinstance(items, list):
        names = (item.get("id", "") if isinstance(item, dict) else item for item in items)
        return "\n".join(str(name) for name in names if name)

    return f"OK: {result.op}"


# ---------------------------------------------------------------------------
# Per-op renderers
# ---------------------------------------------------------------------------


def _render_plan(result: ServiceResult, console: Console, verbose: bool) -> None:
    table = Table(pad_edge=False)
    table.add_column("Batch", style="ws.batch", justify="right")
    table.add_column("Projects", style="ws.project")
    for batch in result.data.get("batches", []):
        table.add_row(str(batch["index"]), ", ".join(batch["projects"]))
    console.print(table)
    count = result.data.get("count", 0)
    batch_count = result.data.get("batch_count", 0)
    console.print(f"\n{count} projects in {batch_count} batches")


def _render_projects(result: ServiceResult, console: Console, verbose: bool) -> None:
    items = result.data.get("items", [])
    table = Table(pad_edge=False)
    table.add_column("Project", style="ws.project", no_wrap=True)
    table.add_column("Version")
    table.add_column("Depends on")
    table.add_column("Used by")
    if verbose:
        table.add_column("Directory", style="ws.path")

    for item in items:
        cells = [
            item["id"],
            item.get("version") or "",
            ", ".join(item.get("dependencies", [])),
            ", ".join(item.get("dependents", [])),
        ]
        if verbose:
            cells.append(item.get("directory") or "")
        table.add_row(*cells)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} projects")


def _render_closure(result: ServiceResult, console: Console, verbose: bool) -> None:
    """``affected`` / ``requires``: names joined in build order."""
    items = result.data.get("items", [])
    if not items:
        console.print("No projects.")
        return
    chain = Text(" → ").join(Text(name, style="ws.project") for name in items)
    console.print(chain)
    console.print(f"\n{len(items)} projects")


def _render_check(result: ServiceResult, console: Console, verbose: bool) -> None:
    count = result.data.get("count", 0)
    console.print(
        Text("OK", style="ws.ok"), f"  No circular dependencies among {count} projects.", sep=""
    )


def _render_generic(result: ServiceResult, console: Console, verbose: bool) -> None:
    console.print(Text("OK", style="ws.ok"), Text(f"  {result.op}", style="ws.op"))
    for key, value in result.data.items():
        if isinstance(value, dict | list):
            value = json.dumps(value, separators=(",", ":"))
        style = "ws.path" if key in ("path", "tarball") else ""
        console.print(Text(f"  {key}: ", style="ws.key"), Text(str(value), style=style), sep="")


def _render_error(result: ServiceResult, console: Console, verbose: bool) -> None:
    error = result.error
    message = error.message if error else "unknown error"
    console.print(
        Text("ERROR", style="ws.error"),
        Text(f"  {result.op}", style="ws.op"),
        Text(f" — {message}"),
        sep="",
    )
    if error is None:
        return
    if error.code == ErrorCode.CIRCULAR_DEPENDENCY:
        trace = Text(error.detail.get("trace", ""), style="ws.error")
        console.print(Text("  cycle: "), trace, sep="")
    elif verbose and error.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in error.detail.items():
            console.print(Text(f"    {key}: {value}"))


# ---------------------------------------------------------------------------
# Verbose extras
# ---------------------------------------------------------------------------


def _render_meta(meta: dict[str, Any], console: Console) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            _render_span(value, console, depth=1)
        else:
            console.print(Text(f"    {key}: {value}"))


def _render_span(span: dict[str, Any], console: Console, *, depth: int) -> None:
    """One line per span, children indented; slow phases (>100ms) highlighted."""
    duration = span.get("duration_ms", 0.0)
    line = Text("    " * depth)
    line.append(f"{duration:>8.2f}ms", style="yellow" if duration > 100 else "dim")
    line.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations")
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)
    for child in span.get("children", []):
        _render_span(child, console, depth=depth + 1)


_OP_RENDERERS: dict[str, _Renderer] = {
    "plan": _render_plan,
    "check": _render_check,
    "list_projects": _render_projects,
    "affected": _render_closure,
    "requires": _render_closure,
}
