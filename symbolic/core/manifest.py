"""清单解析

清单（默认文件名 `.sym`）每行声明一个链接：

    SOURCE -> TARGET

分隔符必须是 `" -> "`（两侧各一个空格）。空行被跳过，但仍计入行号。
没有注释语法，也没有转义。
"""

from pathlib import Path
from typing import Optional, Union

from symbolic.core.data_structures import LinkPair, Manifest
from symbolic.core.exceptions import (
    ManifestIOError,
    ManifestNotFound,
    ManifestSyntaxError,
    PathException,
)
from symbolic.core.logger import get_logger
from symbolic.core.path_normalizer import PathContext, PathNormalizer

logger = get_logger("manifest")

DELIMITER = " -> "
DEFAULT_MANIFEST_FILENAME = ".sym"


class ManifestParser:
    """清单解析器

    解析是全有或全无的：任何一行出错都会中止整个解析，不返回部分结果。
    """

    def __init__(self, normalizer: Optional[PathNormalizer] = None):
        self.normalizer = normalizer or PathNormalizer()

    def parse(self, text: str, path: Optional[Path] = None) -> Manifest:
        """解析清单文本

        Args:
            text: 清单内容
            path: 清单文件路径，仅用于记录

        Returns:
            按文件顺序排列的链接对

        Raises:
            ManifestSyntaxError: 某行缺少 " -> " 分隔符
            PathException: 某行的路径无法展开（带行号）
        """
        manifest = Manifest(path=path)

        # 只按 \n 分行，\x0c 等字符属于路径本身
        for line_number, text_line in enumerate(text.split("\n"), start=1):
            if text_line.endswith("\r"):
                text_line = text_line[:-1]
            if not text_line.strip():
                continue
            manifest.pairs.append(self.parse_line(text_line, line_number))

        logger.debug("Manifest parsed", pairs=len(manifest), path=str(path) if path else None)
        return manifest

    def parse_line(self, text_line: str, line_number: int) -> LinkPair:
        """解析单行，先展开 source 再展开 target"""
        source, delimiter, target = text_line.partition(DELIMITER)
        if not delimiter:
            logger.error("Manifest syntax error", line=line_number, text=text_line)
            raise ManifestSyntaxError(line_number, text_line)

        try:
            return LinkPair(
                source=self.normalizer.normalize(source),
                target=self.normalizer.normalize(target),
                line=line_number,
            )
        except PathException as e:
            raise e.at_line(line_number)


def parse_manifest(text: str, context: Optional[PathContext] = None) -> Manifest:
    """使用给定（或当前进程的）环境解析清单文本"""
    return ManifestParser(PathNormalizer(context)).parse(text)


def locate_manifest(
    path: Optional[Union[str, Path]] = None,
    filename: str = DEFAULT_MANIFEST_FILENAME,
    cwd: Optional[Path] = None,
) -> Path:
    """确定清单文件路径

    Args:
        path: 清单文件或其所在目录；为 None 时使用当前目录
        filename: 在目录中查找的清单文件名
        cwd: 当前工作目录，默认为进程当前目录

    Returns:
        清单文件路径（不保证存在）
    """
    base = Path(cwd) if cwd else Path.cwd()
    if path is None:
        return base / filename

    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = base / candidate
    if candidate.is_dir():
        return candidate / filename
    return candidate


def read_manifest(path: Path) -> str:
    """读取 UTF-8 清单文件

    Raises:
        ManifestNotFound: 文件不存在
        ManifestIOError: 读取失败
    """
    path = Path(path)

    logger.info("Reading manifest", path=str(path))

    if not path.is_file():
        logger.error("Manifest not found", path=str(path))
        raise ManifestNotFound(path)

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read manifest", path=str(path), error=str(e))
        raise ManifestIOError(
            f"Failed to read manifest {path}: {e}",
            details={"path": str(path), "error": str(e)},
        )


def load_manifest(
    path: Optional[Union[str, Path]] = None,
    filename: str = DEFAULT_MANIFEST_FILENAME,
    context: Optional[PathContext] = None,
) -> Manifest:
    """定位、读取并解析清单"""
    context = context or PathContext.from_environment()
    manifest_path = locate_manifest(path, filename=filename, cwd=Path(context.cwd))
    text = read_manifest(manifest_path)
    return ManifestParser(PathNormalizer(context)).parse(text, path=manifest_path)
