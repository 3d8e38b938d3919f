"""符号链接管理器

负责单个链接对的创建、删除与状态检查：
- 创建是幂等的：目标已是符号链接时直接跳过
- 缺失的父目录会被逐级创建
- 删除只作用于链接路径本身，从不触及链接指向的数据
"""

import os
import sys
from pathlib import Path
from typing import Union

from symbolic.core.data_structures import LinkOutcome, LinkPair, LinkState, LinkStatus
from symbolic.core.exceptions import (
    DirectoryCreateError,
    LinkCreateError,
    NoParentDirectoryError,
    NotASymlinkError,
    UnlinkError,
)
from symbolic.core.logger import get_logger

logger = get_logger("symlink_manager")

PathLike = Union[str, Path]


class SymlinkManager:
    """符号链接管理器

    负责创建、删除和检查符号链接。
    """

    def __init__(self, logger_instance=None):
        """初始化符号链接管理器

        Args:
            logger_instance: 日志记录器实例
        """
        self.logger = logger_instance or logger
        self._is_windows = sys.platform == 'win32'

        self.logger.debug("SymlinkManager initialized", platform=sys.platform)

    def create_symlink(self, source: PathLike, target: PathLike) -> LinkOutcome:
        """创建符号链接 target -> source

        source 不要求存在，允许创建悬空链接。

        Args:
            source: 链接指向的路径
            target: 要创建的链接路径

        Returns:
            LinkOutcome.CREATED，或目标已是符号链接时返回 LinkOutcome.SKIPPED

        Raises:
            NoParentDirectoryError: target 没有父目录（例如根路径）
            DirectoryCreateError: 父目录创建失败
            LinkCreateError: 符号链接创建失败
        """
        source = str(source)
        target_path = Path(target)

        # 已存在的符号链接（无论指向哪里、是否有效）都不做改动
        if target_path.is_symlink():
            self.logger.info("Symlink already exists, skipping", target=str(target_path))
            return LinkOutcome.SKIPPED

        parent = target_path.parent
        if parent == target_path:
            self.logger.error("Target has no parent directory", target=str(target_path))
            raise NoParentDirectoryError(str(target_path))

        if not parent.exists():
            self.logger.debug("Creating parent directory", path=str(parent))
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except (OSError, ValueError) as e:
                self.logger.error(
                    "Failed to create parent directory",
                    path=str(parent),
                    error=str(e)
                )
                raise DirectoryCreateError(str(parent), e)

        self.logger.info("Creating symlink", source=source, target=str(target_path))

        try:
            os.symlink(source, target_path)
        except (OSError, ValueError) as e:
            # 路径中含 NUL 等非法字符时抛出 ValueError
            self.logger.error(
                "Failed to create symlink",
                source=source,
                target=str(target_path),
                error=str(e)
            )
            raise LinkCreateError(source, str(target_path), e)

        self.logger.info("Symlink created successfully", source=source, target=str(target_path))
        return LinkOutcome.CREATED

    def remove_symlink(self, target: PathLike) -> None:
        """删除符号链接

        根据链接解析后的类型选择删除方式，但删除的始终是链接本身。

        Args:
            target: 符号链接路径

        Raises:
            NotASymlinkError: target 不是符号链接
            UnlinkError: 删除失败
        """
        link = Path(target)

        self.logger.info("Removing symlink", link=str(link))

        if not link.is_symlink():
            self.logger.warning("Refusing to remove a path that is not a symlink", link=str(link))
            raise NotASymlinkError(str(link))

        try:
            if link.is_dir():
                self._remove_directory_link(link)
            else:
                link.unlink()
        except OSError as e:
            self.logger.error("Failed to remove symlink", link=str(link), error=str(e))
            raise UnlinkError(str(link), e)

        self.logger.info("Symlink removed successfully", link=str(link))

    def get_link_status(self, pair: LinkPair) -> LinkStatus:
        """比较期望的链接对与文件系统中的实际状态

        Args:
            pair: 期望的链接对

        Returns:
            链接状态
        """
        target = Path(pair.target)

        self.logger.debug("Getting symlink status", target=str(target))

        if target.is_symlink():
            actual = os.readlink(target)
            if actual != pair.source:
                state = LinkState.MISLINKED
            elif not target.exists():
                state = LinkState.BROKEN
            else:
                state = LinkState.LINKED
            return LinkStatus(pair=pair, state=state, actual_source=actual)

        if target.exists():
            return LinkStatus(pair=pair, state=LinkState.CONFLICT)

        return LinkStatus(pair=pair, state=LinkState.MISSING)

    # 私有方法

    def _remove_directory_link(self, link: Path) -> None:
        """删除指向目录的链接，不进入目录内部"""
        if self._is_windows:
            # Windows 上的目录链接需要用 rmdir 删除
            os.rmdir(link)
        else:
            link.unlink()
