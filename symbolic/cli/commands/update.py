"""symbolic update 命令实现

读取清单并创建其中声明的所有符号链接。已存在的链接会被跳过，
因此可以反复执行。
"""

import sys
from pathlib import Path
from typing import Optional

import click

from symbolic.core.config_manager import ConfigManager
from symbolic.core.data_structures import BatchReport, LinkOutcome
from symbolic.core.exceptions import BatchLinkError, ManifestNotFound, SymbolicException
from symbolic.core.logger import get_logger
from symbolic.core.operations import run_from_manifest
from symbolic.cli.utils import OutputFormatter, FormatterConfig, format_summary

logger = get_logger("update_command")


class UpdateCommand:
    """清单同步命令处理器"""

    def __init__(self, path: Optional[str] = None, config_manager: Optional[ConfigManager] = None):
        """
        Args:
            path: 清单文件或其所在目录，默认为当前目录
            config_manager: 配置管理器
        """
        self.path = path
        self.config_manager = config_manager

    def execute(self) -> BatchReport:
        """执行同步

        Raises:
            BatchLinkError: 部分链接创建失败
            SymbolicException: 清单无法读取或解析
        """
        logger.info("Update command started", path=self.path or ".")
        return run_from_manifest(self.path, config=self.config_manager)


def render_report(report: BatchReport, formatter: OutputFormatter) -> None:
    """逐条输出创建与跳过的链接"""
    for result in report:
        if result.outcome == LinkOutcome.CREATED:
            click.echo(formatter.success(f"Linked {result.pair}"))
        elif result.outcome == LinkOutcome.SKIPPED:
            click.echo(formatter.info(f"Already linked {result.pair.target}"))


@click.command()
@click.argument("path", required=False)
@click.pass_context
def update(ctx: click.Context, path: Optional[str]) -> None:
    """按清单更新符号链接（PATH 为清单文件或其所在目录，默认 "."）

    清单中以 ./ 开头的路径相对于当前工作目录展开，而不是清单所在目录。

    \b
    使用示例:
    symbolic update              # 使用当前目录下的 .sym
    symbolic up ~/dotfiles       # 使用 ~/dotfiles/.sym
    symbolic up links.sym        # 使用指定的清单文件
    """
    obj = ctx.obj or {}
    formatter = OutputFormatter(obj.get('formatter_config') or FormatterConfig())
    config_manager = obj.get('config_manager')

    try:
        report = UpdateCommand(path, config_manager).execute()
    except BatchLinkError as e:
        render_report(e.report, formatter)
        for message in e.report.failure_messages():
            click.echo(formatter.error(message), err=True)
        click.echo(
            formatter.format_error('partial_failure', failed=len(e.failures), total=len(e.report)),
            err=True,
        )
        sys.exit(1)
    except ManifestNotFound as e:
        click.echo(
            formatter.format_error('manifest_not_found', message=e.message, filename=Path(e.path).name),
            err=True,
        )
        sys.exit(1)
    except SymbolicException as e:
        click.echo(formatter.error(e.message), err=True)
        sys.exit(1)

    render_report(report, formatter)
    if obj.get('verbose'):
        click.echo(format_summary("update", report.summary(), formatter.config))
