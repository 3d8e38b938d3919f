"""symbolic status 命令实现

对比清单与文件系统，列出每个链接的当前状态，不做任何修改。
"""

import sys
from typing import Optional

import click

from symbolic.core.exceptions import SymbolicException
from symbolic.core.operations import manifest_status
from symbolic.cli.utils import OutputFormatter, FormatterConfig, format_summary


@click.command()
@click.argument("path", required=False)
@click.pass_context
def status(ctx: click.Context, path: Optional[str]) -> None:
    """查看清单中各链接的状态"""
    obj = ctx.obj or {}
    formatter = OutputFormatter(obj.get('formatter_config') or FormatterConfig())

    try:
        statuses = manifest_status(path, config=obj.get('config_manager'))
    except SymbolicException as e:
        click.echo(formatter.error(e.message), err=True)
        sys.exit(1)

    if not statuses:
        click.echo(formatter.info("Manifest is empty"))
        return

    rows = [
        [item.pair.line, item.state.value, item.pair.target, item.pair.source]
        for item in statuses
    ]
    click.echo(formatter.format_table(["Line", "State", "Target", "Source"], rows))

    counts = {}
    for item in statuses:
        counts[item.state.value] = counts.get(item.state.value, 0) + 1
    click.echo(format_summary("status", counts, formatter.config))
