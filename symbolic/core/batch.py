"""批量链接编排

对清单中的每个链接对依次执行创建，单个失败不会阻止其余链接对。
"""

from typing import Iterable, List, Optional

from symbolic.core.data_structures import (
    BatchReport,
    LinkOutcome,
    LinkPair,
    LinkResult,
    LinkStatus,
)
from symbolic.core.exceptions import BatchLinkError, LinkException
from symbolic.core.logger import get_logger
from symbolic.core.symlink_manager import SymlinkManager

logger = get_logger("batch")

ALREADY_LINKED = "already-linked"


class LinkOrchestrator:
    """批量链接编排器"""

    def __init__(self, manager: Optional[SymlinkManager] = None):
        self.manager = manager or SymlinkManager()

    def apply(self, pairs: Iterable[LinkPair]) -> BatchReport:
        """为每个链接对创建符号链接

        Args:
            pairs: 链接对序列

        Returns:
            所有链接对的执行报告

        Raises:
            BatchLinkError: 至少一个链接对失败；异常中携带完整报告
        """
        report = BatchReport()

        for pair in pairs:
            try:
                outcome = self.manager.create_symlink(pair.source, pair.target)
            except LinkException as e:
                logger.warning(
                    "Failed to create symlink",
                    source=pair.source,
                    target=pair.target,
                    line=pair.line,
                    error=e.message
                )
                report.add(LinkResult(pair=pair, outcome=LinkOutcome.FAILED, error=e))
                continue

            reason = ALREADY_LINKED if outcome == LinkOutcome.SKIPPED else None
            report.add(LinkResult(pair=pair, outcome=outcome, reason=reason))

        logger.info("Batch finished", **report.summary())

        if report.has_failures:
            raise BatchLinkError(report)

        return report

    def inspect(self, pairs: Iterable[LinkPair]) -> List[LinkStatus]:
        """检查每个链接对的当前状态，不修改文件系统"""
        return [self.manager.get_link_status(pair) for pair in pairs]
