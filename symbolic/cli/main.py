"""symbolic CLI 主入口"""

import sys
import importlib

import click

from symbolic import __version__
from symbolic.core.config_manager import ConfigManager
from symbolic.core.exceptions import ConfigException
from symbolic.core.logger import LoggerConfig, configure_logger
from symbolic.cli.commands.link import link
from symbolic.cli.commands.update import update
from symbolic.cli.commands.status import status
from symbolic.cli.utils import OutputFormatter, FormatterConfig

# 导入 break 命令（break 是保留字，使用 importlib）
_break_module = importlib.import_module("symbolic.cli.commands.break")
break_cmd = _break_module.break_cmd


@click.group()
@click.version_option(version=__version__)
@click.option(
    '--verbose',
    is_flag=True,
    help='详细日志输出（调试用）'
)
@click.option(
    '--no-color',
    is_flag=True,
    help='关闭彩色输出'
)
@click.pass_context
def cli(ctx, verbose, no_color):
    """symbolic - 配置文件符号链接工具

    \b
    命令：
      link <source> <target>  创建链接 <target> -> <source>
      update [path]           按 .sym 清单更新链接（别名 up）
      break <target>          删除符号链接
      status [path]           查看清单中各链接的状态

    \b
    .sym 清单格式（每行一个）：
      ~/dotfiles/vimrc -> ~/.vimrc
      ./nvim -> ~/.config/nvim
    """
    ctx.ensure_object(dict)

    config_manager = ConfigManager()
    try:
        config_manager.load_config()
    except ConfigException as e:
        click.echo(OutputFormatter(FormatterConfig(no_color)).error(e.message), err=True)
        sys.exit(1)

    configure_logger(LoggerConfig.from_dict(config_manager.get("logging", {}), verbose=verbose))

    no_color = no_color or not config_manager.get("display.colors", True)

    ctx.obj['verbose'] = verbose
    ctx.obj['no_color'] = no_color
    ctx.obj['config_manager'] = config_manager
    ctx.obj['formatter_config'] = FormatterConfig(no_color=no_color)


# 注册命令
cli.add_command(link)
cli.add_command(update)
cli.add_command(update, name="up")
cli.add_command(break_cmd, name="break")
cli.add_command(status)


def main():
    """CLI 入口点，处理全局异常"""
    try:
        cli()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
