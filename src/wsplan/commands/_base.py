"""Click base classes that carry ready-to-paste ``--examples``.

``--help`` stays short. A command declares ``examples=`` and gets an eager
``--examples`` flag that prints them and exits. A group declares none of
its own: its ``--examples`` lists every subcommand's, so ``wsplan
--examples`` is the whole cookbook.
"""

from __future__ import annotations

from typing import Any

import click


def collect_examples(ctx: click.Context, cmd: click.Command) -> str:
    """Examples for *cmd*, or those of its subcommands when it is a group."""
    if not isinstance(cmd, click.Group):
        return getattr(cmd, "examples", None) or ""
    blocks = []
    for name in cmd.list_commands(ctx):
        sub = cmd.get_command(ctx, name)
        if sub is not None and not sub.hidden:
            text = collect_examples(ctx, sub)
            if text:
                blocks.append(text)
    return "\n\n".join(blocks)


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    text = collect_examples(ctx, ctx.command)
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(text or "  (none)")
    ctx.exit(0)


def _examples_option() -> click.Option:
    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show_examples,
        help="Show usage examples and exit.",
    )


class WsCommand(click.Command):
    """Leaf command; ``--examples`` is added only when *examples* is given."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option())


class WsGroup(click.Group):
    """Group whose ``--examples`` gathers its subcommands' examples.

    ``@group.command(examples=...)`` builds a :class:`WsCommand` without an
    explicit ``cls=``, and nested ``@group.group()`` builds another WsGroup.
    """

    command_class = WsCommand
    group_class = type

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.params.append(_examples_option())
