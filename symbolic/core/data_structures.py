"""symbolic 核心数据结构定义

定义链接对、清单、单个链接的操作结果以及批量执行报告。"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional
from enum import Enum
from pathlib import Path


class LinkOutcome(Enum):
    """单个链接的创建结果"""
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


class LinkState(Enum):
    """链接在文件系统中的实际状态"""
    LINKED = "linked"          # 已链接到期望的源
    MISLINKED = "mislinked"    # 是符号链接，但指向别处
    BROKEN = "broken"          # 指向期望的源，但源不存在
    MISSING = "missing"        # 目标路径不存在
    CONFLICT = "conflict"      # 目标路径被普通文件或目录占用


@dataclass(frozen=True)
class LinkPair:
    """链接对：target 是要创建的链接路径，source 是它指向的路径"""
    source: str
    target: str
    line: int = 0

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


@dataclass
class Manifest:
    """解析后的清单，按文件顺序保存链接对"""
    pairs: List[LinkPair] = field(default_factory=list)
    path: Optional[Path] = None

    def __iter__(self) -> Iterator[LinkPair]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


@dataclass
class LinkResult:
    """单个链接对的执行结果"""
    pair: LinkPair
    outcome: LinkOutcome
    reason: Optional[str] = None
    error: Optional[Exception] = None


@dataclass
class BatchReport:
    """批量创建链接的汇总报告

    每个链接对都会留下一条结果，包括被跳过的。
    """
    results: List[LinkResult] = field(default_factory=list)

    def add(self, result: LinkResult) -> None:
        self.results.append(result)

    def __iter__(self) -> Iterator[LinkResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def _filter(self, outcome: LinkOutcome) -> List[LinkResult]:
        return [r for r in self.results if r.outcome == outcome]

    @property
    def created(self) -> List[LinkResult]:
        return self._filter(LinkOutcome.CREATED)

    @property
    def skipped(self) -> List[LinkResult]:
        return self._filter(LinkOutcome.SKIPPED)

    @property
    def failed(self) -> List[LinkResult]:
        return self._filter(LinkOutcome.FAILED)

    @property
    def has_failures(self) -> bool:
        return any(r.outcome == LinkOutcome.FAILED for r in self.results)

    def summary(self) -> Dict[str, int]:
        """按结果类型统计数量"""
        return {
            "created": len(self.created),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }

    def failure_messages(self) -> List[str]:
        """每条失败一段信息，以失败的链接对开头，清单中的链接对还带上行号"""
        messages = []
        for r in self.failed:
            header = f"Line {r.pair.line}: {r.pair}" if r.pair.line else str(r.pair)
            messages.append(f"{header}\n{r.error}")
        return messages

    def error_message(self) -> str:
        """合并所有失败信息，每条失败占一段"""
        return "\n".join(self.failure_messages())


@dataclass
class LinkStatus:
    """期望的链接对与文件系统实际状态的比较结果"""
    pair: LinkPair
    state: LinkState
    actual_source: Optional[str] = None

    @property
    def is_healthy(self) -> bool:
        return self.state == LinkState.LINKED
