"""symbolic link 命令实现"""

import sys

import click

from symbolic.core.data_structures import LinkOutcome
from symbolic.core.exceptions import SymbolicException
from symbolic.core.operations import link_single
from symbolic.cli.utils import OutputFormatter, FormatterConfig


@click.command()
@click.argument("source")
@click.argument("target")
@click.pass_context
def link(ctx: click.Context, source: str, target: str) -> None:
    """创建链接 TARGET，使其指向 SOURCE

    路径按原样使用，不展开 ~ 或 ./ 简写。
    """
    obj = ctx.obj or {}
    formatter = OutputFormatter(obj.get('formatter_config') or FormatterConfig())

    try:
        outcome = link_single(source, target)
    except SymbolicException as e:
        click.echo(formatter.error(e.message), err=True)
        sys.exit(1)

    if outcome == LinkOutcome.SKIPPED:
        click.echo(formatter.info(f"Already linked {target}"))
    else:
        click.echo(formatter.success(f"Linked {source} -> {target}"))
