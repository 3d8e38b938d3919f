"""对外操作

命令行各子命令调用的入口函数。引擎抛出的 SymbolicException 原样向上传递，
由调用方决定如何报告。
"""

from pathlib import Path
from typing import List, Optional, Union

from symbolic.core.batch import LinkOrchestrator
from symbolic.core.config_manager import ConfigManager
from symbolic.core.data_structures import BatchReport, LinkOutcome, LinkStatus, Manifest
from symbolic.core.logger import OperationScope, get_logger
from symbolic.core.manifest import load_manifest
from symbolic.core.path_normalizer import PathContext
from symbolic.core.symlink_manager import SymlinkManager

logger = get_logger("operations")


def _load(
    path: Optional[Union[str, Path]],
    context: Optional[PathContext],
    config: Optional[ConfigManager],
) -> Manifest:
    context = context or PathContext.from_environment()
    config = config or ConfigManager(Path(context.cwd))
    return load_manifest(path, filename=config.manifest_filename, context=context)


def run_from_manifest(
    path: Optional[Union[str, Path]] = None,
    context: Optional[PathContext] = None,
    config: Optional[ConfigManager] = None,
) -> BatchReport:
    """读取清单并创建其中声明的所有链接

    清单解析失败时不会产生任何文件系统改动。

    Args:
        path: 清单文件或其所在目录，默认为当前目录
        context: 路径展开环境
        config: 配置管理器

    Returns:
        执行报告

    Raises:
        ManifestException: 清单缺失或格式错误
        PathException: 清单中的路径无法展开
        BatchLinkError: 部分链接创建失败
    """
    with OperationScope("update", context={"path": str(path) if path else "."}, logger=logger):
        manifest = _load(path, context, config)
        return LinkOrchestrator().apply(manifest)


def link_single(source: str, target: str) -> LinkOutcome:
    """直接创建一个链接，不展开路径简写"""
    with OperationScope("link", context={"source": source, "target": target}, logger=logger):
        return SymlinkManager().create_symlink(source, target)


def unlink_single(target: str) -> None:
    """删除一个符号链接"""
    with OperationScope("break", context={"target": target}, logger=logger):
        SymlinkManager().remove_symlink(target)


def manifest_status(
    path: Optional[Union[str, Path]] = None,
    context: Optional[PathContext] = None,
    config: Optional[ConfigManager] = None,
) -> List[LinkStatus]:
    """检查清单中每个链接的状态"""
    manifest = _load(path, context, config)
    return LinkOrchestrator().inspect(manifest)
