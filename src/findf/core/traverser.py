"""
单根目录遍历模块
"""
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .errors import TraversalSkip
from .file_tree import FileTree, LocalFileTree
from .models import TargetNameSet, TraversalResult
from .path_filter import PathFilter


class Traverser:
    """用显式栈遍历一个根目录，收集文件名命中的文件"""

    def __init__(
        self,
        names: TargetNameSet,
        path_filter: Optional[PathFilter] = None,
        home: Optional[Path] = None,
        tree: Optional[FileTree] = None,
        on_scanned: Optional[Callable[[int], None]] = None,
        batch_size: int = 256,
    ):
        """
        Args:
            names: 要匹配的文件名集合（精确、区分大小写）
            path_filter: 路径过滤器，None 表示不过滤
            home: 家目录，用于隐藏路径判断
            tree: 目录读取实现，默认本地文件系统
            on_scanned: 扫描计数回调，按批次传入增量
            batch_size: 每累计多少条调用一次 on_scanned
        """
        self.names = names
        self.path_filter = path_filter or PathFilter.disabled()
        self.home = home if home is not None else Path.home()
        self.tree = tree or LocalFileTree()
        self.on_scanned = on_scanned
        self.batch_size = max(1, batch_size)

    def walk(self, root: Path) -> TraversalResult:
        """遍历根目录

        Args:
            root: 根目录

        Returns:
            TraversalResult: 命中文件、扫描条目数和跳过条目数
        """
        result = TraversalResult(root=root)
        pending = 0
        stack = [root]
        path_filter = self.path_filter

        while stack:
            current = stack.pop()
            try:
                entries = self.tree.list_dir(current)
            except TraversalSkip as e:
                logger.debug(str(e))
                result.skipped += 1
                continue

            for entry in entries:
                if path_filter.is_pruned(entry.path):
                    continue
                if path_filter.is_hidden(entry.path, self.home):
                    continue

                result.scanned += 1
                pending += 1
                if pending >= self.batch_size:
                    self._flush(pending)
                    pending = 0

                if entry.is_dir:
                    if not path_filter.is_package(entry.path):
                        stack.append(entry.path)
                elif entry.is_file and entry.name in self.names:
                    result.matches.append(entry.path)

        if pending:
            self._flush(pending)

        logger.info(
            f"遍历完成 {root}: 扫描 {result.scanned} 个条目，命中 {len(result.matches)} 个，跳过 {result.skipped} 个"
        )
        return result

    def _flush(self, count: int) -> None:
        if self.on_scanned is not None:
            self.on_scanned(count)
