"""
进度汇总模块 - 线程安全的计数器、耗时和运行状态
"""
import time
from threading import Lock
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .errors import RunStateError
from .models import CopyError, FinalReport, ProgressSnapshot, RunState

ProgressCallback = Callable[[ProgressSnapshot], None]

# 允许的状态转换
_TRANSITIONS = {
    RunState.IDLE: {RunState.SCANNING},
    RunState.SCANNING: {RunState.COPYING},
    RunState.COPYING: {RunState.DONE},
    RunState.DONE: set(),
}


class ProgressAggregator:
    """一次运行的共享状态

    扫描阶段由多个线程写入（扫描计数、命中列表），全部经过同一把锁；
    复制阶段只由复制器顺序写入。
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._lock = Lock()
        self._clock = clock
        self._state = RunState.IDLE
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None

        self._files_scanned = 0
        self._files_copied = 0
        self._failed_copies = 0
        self._errors: List[CopyError] = []
        # 按根目录序号分槽，合并时按根目录顺序拼接
        self._match_slots: Dict[int, List[Path]] = {}
        self._matches: Optional[Tuple[Path, ...]] = None
        self._roots: Tuple[Path, ...] = ()

        self._subscribers: List[ProgressCallback] = []

    # ---- 状态 ----

    @property
    def state(self) -> RunState:
        return self._state

    def subscribe(self, callback: ProgressCallback) -> None:
        """注册进度回调，状态变化、扫描批次和每个复制文件后调用"""
        self._subscribers.append(callback)

    def start(self) -> None:
        """开始计时，运行被接受的时刻"""
        with self._lock:
            if self._started_at is not None:
                raise RunStateError("本次运行已经开始")
            self._started_at = self._clock()

    def transition(self, new_state: RunState) -> None:
        with self._lock:
            if new_state not in _TRANSITIONS[self._state]:
                raise RunStateError(f"非法的状态转换: {self._state.value} -> {new_state.value}")
            if self._started_at is None:
                self._started_at = self._clock()
            if new_state is RunState.COPYING:
                self._freeze_matches()
            if new_state is RunState.DONE:
                self._finished_at = self._clock()
            self._state = new_state
        logger.debug(f"运行状态: {new_state.value}")
        self._notify()

    # ---- 扫描阶段 ----

    def set_roots(self, roots: Sequence[Path]) -> None:
        self._roots = tuple(roots)

    def add_scanned(self, count: int) -> None:
        with self._lock:
            self._files_scanned += count
        self._notify()

    def add_matches(self, root_index: int, matches: Sequence[Path]) -> None:
        """一次性提交一个根目录的全部命中"""
        with self._lock:
            if self._state is not RunState.SCANNING:
                raise RunStateError("只能在扫描阶段提交命中结果")
            self._match_slots.setdefault(root_index, []).extend(matches)

    def _freeze_matches(self) -> None:
        # 调用方持有锁；跨根目录重复的路径只保留第一次出现
        seen = set()
        merged = []
        for index in sorted(self._match_slots):
            for path in self._match_slots[index]:
                if path not in seen:
                    seen.add(path)
                    merged.append(path)
        self._matches = tuple(merged)

    @property
    def matches(self) -> Tuple[Path, ...]:
        """扫描结束后冻结的命中列表"""
        with self._lock:
            if self._matches is None:
                raise RunStateError("扫描尚未结束")
            return self._matches

    # ---- 复制阶段 ----

    def record_copied(self) -> None:
        with self._lock:
            self._require_copying()
            self._files_copied += 1
        self._notify()

    def record_failure(self, error: CopyError) -> None:
        with self._lock:
            self._require_copying()
            self._failed_copies += 1
            self._errors.append(error)
        self._notify()

    def _require_copying(self) -> None:
        if self._state is not RunState.COPYING:
            raise RunStateError("只能在复制阶段记录复制结果")
        if self._files_copied + self._failed_copies >= len(self._matches):
            raise RunStateError("复制记录数超过命中文件数")

    # ---- 输出 ----

    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._finished_at if self._finished_at is not None else self._clock()
        return end - self._started_at

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            total = len(self._matches) if self._matches is not None else sum(
                len(m) for m in self._match_slots.values()
            )
            return ProgressSnapshot(
                state=self._state,
                files_scanned=self._files_scanned,
                files_copied=self._files_copied,
                failed_copies=self._failed_copies,
                total_matches=total,
                elapsed_seconds=self.elapsed(),
            )

    def final_report(self) -> FinalReport:
        with self._lock:
            if self._state is not RunState.DONE:
                raise RunStateError("运行尚未结束")
            return FinalReport(
                files_scanned=self._files_scanned,
                files_copied=self._files_copied,
                failed_copies=self._failed_copies,
                errors=tuple(self._errors),
                elapsed_seconds=self.elapsed(),
                total_matches=len(self._matches),
                roots=self._roots,
            )

    def _notify(self) -> None:
        if not self._subscribers:
            return
        snap = self.snapshot()
        for callback in self._subscribers:
            callback(snap)
