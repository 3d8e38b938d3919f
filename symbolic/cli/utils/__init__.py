"""CLI 工具包导出"""

from .formatting import (
    OutputFormatter,
    FormatterConfig,
    format_summary,
    Color,
)

__all__ = [
    'OutputFormatter',
    'FormatterConfig',
    'format_summary',
    'Color',
]
