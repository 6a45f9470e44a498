"""findf 数据模型"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Tuple


class RunState(Enum):
    """一次运行的状态"""
    IDLE = "idle"
    SCANNING = "scanning"
    COPYING = "copying"
    DONE = "done"


class CollisionPolicy(Enum):
    """目标目录中同名文件的处理方式"""
    OVERWRITE = "overwrite"  # 后复制的覆盖先复制的
    RENAME = "rename"  # 追加 " (1)"、" (2)" ...
    FAIL = "fail"  # 记为复制失败


TargetNameSet = FrozenSet[str]


@dataclass(frozen=True)
class SearchRequest:
    """一次搜索复制的输入"""
    name_list_path: Path
    roots: Tuple[Path, ...]
    exclude_system_folders: bool
    destination: Path
    home: Path = field(default_factory=Path.home)
    collision_policy: CollisionPolicy = CollisionPolicy.OVERWRITE


@dataclass
class TraversalResult:
    """单个根目录的遍历结果"""
    root: Path
    matches: List[Path] = field(default_factory=list)
    scanned: int = 0
    skipped: int = 0  # 因 I/O 错误跳过的条目


@dataclass(frozen=True)
class CopyError:
    """单个文件复制失败记录"""
    path: Path
    cause: str


@dataclass(frozen=True)
class ProgressSnapshot:
    state: RunState
    files_scanned: int
    files_copied: int
    failed_copies: int
    total_matches: int
    elapsed_seconds: float


@dataclass(frozen=True)
class FinalReport:
    """运行结束后的汇总"""
    files_scanned: int
    files_copied: int
    failed_copies: int
    errors: Tuple[CopyError, ...]
    elapsed_seconds: float
    total_matches: int = 0
    roots: Tuple[Path, ...] = ()

    def render(self) -> str:
        """生成文本汇总，耗时保留两位小数"""
        lines = [
            f"Searched {self.files_scanned} files",
            f"Copied {self.files_copied} files",
        ]
        if self.failed_copies:
            lines.append(f"Failed {self.failed_copies} files")
        lines.append(f"Time elapsed: {self.elapsed_seconds:.2f} seconds")
        return "\n".join(lines) + "\n"
