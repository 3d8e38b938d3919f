"""symbolic break 命令实现

break 是 Python 关键字，本模块需要通过 importlib 导入。
"""

import sys

import click

from symbolic.core.exceptions import NotASymlinkError, SymbolicException
from symbolic.core.operations import unlink_single
from symbolic.cli.utils import OutputFormatter, FormatterConfig


@click.command()
@click.argument("target")
@click.pass_context
def break_cmd(ctx: click.Context, target: str) -> None:
    """删除符号链接 TARGET（只删除链接本身）"""
    obj = ctx.obj or {}
    formatter = OutputFormatter(obj.get('formatter_config') or FormatterConfig())

    try:
        unlink_single(target)
    except NotASymlinkError as e:
        click.echo(formatter.format_error('not_a_symlink', message=e.message), err=True)
        sys.exit(1)
    except SymbolicException as e:
        click.echo(formatter.error(e.message), err=True)
        sys.exit(1)

    click.echo(formatter.success(f"Link removed {target}"))
