"""路径规范化

把清单中的 `~` 与 `./` 简写展开为绝对路径。

两种替换的行为并不对称：
- `~` 是纯文本替换，路径中任意位置的每个 `~` 都会被替换为 HOME 目录
- `./` 只在路径开头生效，开头连续的 `./` 会被替换为当前工作目录

这一差异沿用自既有的清单语义，修改前需要确认。
"""

import os
from dataclasses import dataclass
from typing import Optional

from symbolic.core.exceptions import EmptyPathError, HomeDirectoryUnresolved
from symbolic.core.logger import get_logger

logger = get_logger("path_normalizer")

HOME_SHORTHAND = "~"
CWD_SHORTHAND = "./"


@dataclass(frozen=True)
class PathContext:
    """路径展开所需的环境信息

    Attributes:
        home: HOME 目录，未定义时为 None
        cwd: 当前工作目录的绝对路径
    """
    home: Optional[str]
    cwd: str

    @classmethod
    def from_environment(cls) -> 'PathContext':
        """从进程环境读取 HOME 与当前工作目录"""
        return cls(home=os.environ.get("HOME"), cwd=os.getcwd())


class PathNormalizer:
    """路径规范化器"""

    def __init__(self, context: Optional[PathContext] = None):
        self.context = context or PathContext.from_environment()

    def normalize(self, raw: str) -> str:
        """展开单个路径字符串

        Args:
            raw: 清单中的原始路径

        Returns:
            展开后的路径；不含简写时原样返回

        Raises:
            EmptyPathError: 路径为空
            HomeDirectoryUnresolved: 路径包含 `~` 但 HOME 未定义
        """
        if not raw:
            raise EmptyPathError()

        if HOME_SHORTHAND in raw:
            home = self.context.home
            if home is None:
                logger.error("HOME is not defined", path=raw)
                raise HomeDirectoryUnresolved(raw)
            return raw.replace(HOME_SHORTHAND, home)

        if raw.startswith(CWD_SHORTHAND):
            rest = raw
            while rest.startswith(CWD_SHORTHAND):
                rest = rest[len(CWD_SHORTHAND):]
            return f"{self.context.cwd.rstrip(os.sep)}{os.sep}{rest}"

        return raw


def normalize(raw: str, context: Optional[PathContext] = None) -> str:
    """使用给定（或当前进程的）环境展开路径"""
    return PathNormalizer(context).normalize(raw)
