"""
并发扫描模块 - 每个根目录一个工作线程，结果经同一个汇总点合并
"""
import concurrent.futures
from pathlib import Path
from typing import Optional, Sequence, Tuple

from loguru import logger

from .file_tree import FileTree
from .models import TargetNameSet, TraversalResult
from .path_filter import PathFilter
from .progress import ProgressAggregator
from .traverser import Traverser


class ConcurrentScanner:
    """并发扫描器类"""

    def __init__(
        self,
        aggregator: ProgressAggregator,
        path_filter: Optional[PathFilter] = None,
        home: Optional[Path] = None,
        tree: Optional[FileTree] = None,
        batch_size: int = 256,
    ):
        self.aggregator = aggregator
        self.path_filter = path_filter
        self.home = home
        self.tree = tree
        self.batch_size = batch_size

    def scan(self, roots: Sequence[Path], names: TargetNameSet) -> Tuple[TraversalResult, ...]:
        """
        并发遍历所有根目录，全部完成后才返回

        Args:
            roots: 根目录列表，命中结果按此顺序合并
            names: 要匹配的文件名集合

        Returns:
            Tuple[TraversalResult, ...]: 各根目录的遍历结果，顺序与 roots 一致
        """
        if not roots:
            logger.warning("没有需要扫描的根目录")
            return ()

        logger.info(f"开始扫描 {len(roots)} 个根目录，使用线程数: {len(roots)}")

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=len(roots), thread_name_prefix="findf-scan"
        ) as executor:
            futures = [
                executor.submit(self._scan_root, index, root, names)
                for index, root in enumerate(roots)
            ]
            # 等待所有根目录完成；工作线程中的意外异常在这里重新抛出
            results = tuple(future.result() for future in futures)

        total_scanned = sum(r.scanned for r in results)
        total_matches = sum(len(r.matches) for r in results)
        logger.info(f"扫描完成: 共扫描 {total_scanned} 个条目，命中 {total_matches} 个文件")
        return results

    def _scan_root(self, index: int, root: Path, names: TargetNameSet) -> TraversalResult:
        """单个根目录的工作线程"""
        traverser = Traverser(
            names,
            path_filter=self.path_filter,
            home=self.home,
            tree=self.tree,
            on_scanned=self.aggregator.add_scanned,
            batch_size=self.batch_size,
        )
        result = traverser.walk(root)
        self.aggregator.add_matches(index, result.matches)
        return result
