"""
查找服务模块 - 整合所有组件的高级服务接口

一次运行: 校验请求 -> 读取名单 -> 并发扫描 -> 顺序复制 -> 汇总报告
"""
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from ..config import FindfConfig
from .copier import Copier
from .errors import InvalidPathError
from .file_tree import FileTree, LocalFileTree
from .models import CollisionPolicy, FinalReport, RunState, SearchRequest
from .name_list import load_target_names, to_name_set
from .path_filter import PathFilter
from .progress import ProgressAggregator, ProgressCallback
from .roots import discover_roots
from .scanner import ConcurrentScanner


class FileFinder:
    """查找服务类 - 每次 run 都使用新的 ProgressAggregator"""

    def __init__(self, config: Optional[FindfConfig] = None, tree: Optional[FileTree] = None):
        self.config = config or FindfConfig()
        self.tree = tree or LocalFileTree()
        self.aggregator: Optional[ProgressAggregator] = None

    def build_request(
        self,
        name_list_path: Path,
        destination: Path,
        roots: Optional[Iterable[Path]] = None,
        exclude_system_folders: Optional[bool] = None,
        home: Optional[Path] = None,
        collision_policy: Optional[CollisionPolicy] = None,
    ) -> SearchRequest:
        """根据配置补全请求，未指定根目录时使用家目录和所有挂载卷

        Args:
            name_list_path: 名单文件
            destination: 目标目录
            roots: 根目录列表
            exclude_system_folders: 是否排除系统文件夹，None 时取配置
            home: 家目录
            collision_policy: 同名处理方式，None 时取配置

        Returns:
            SearchRequest: 请求
        """
        home = Path(home) if home is not None else Path.home()
        root_list = [Path(r) for r in roots] if roots else discover_roots(home)
        return SearchRequest(
            name_list_path=Path(name_list_path),
            roots=tuple(root_list),
            exclude_system_folders=(
                self.config.exclude_system_folders if exclude_system_folders is None else exclude_system_folders
            ),
            destination=Path(destination),
            home=home,
            collision_policy=collision_policy or self.config.collision_policy,
        )

    def make_path_filter(self, exclude_system_folders: bool) -> PathFilter:
        if not exclude_system_folders:
            return PathFilter.disabled()
        return PathFilter(
            prefixes=self.config.system_prefixes,
            match_components=self.config.match_components,
            package_extensions=self.config.package_extensions,
        )

    def validate(self, request: SearchRequest) -> None:
        """校验根目录和目标目录

        Raises:
            InvalidPathError: 路径不是绝对路径或不是已存在的目录
        """
        if not request.roots:
            raise InvalidPathError("没有可扫描的根目录")
        for root in request.roots:
            if not root.is_absolute():
                raise InvalidPathError(f"根目录必须是绝对路径: {root}")
            if not self.tree.is_dir(root):
                raise InvalidPathError(f"根目录不存在或不是文件夹: {root}")

        destination = request.destination
        if not destination.is_absolute():
            raise InvalidPathError(f"目标目录必须是绝对路径: {destination}")
        if not destination.is_dir():
            raise InvalidPathError(f"目标目录不存在或不是文件夹: {destination}")

    def run(self, request: SearchRequest, on_progress: Optional[ProgressCallback] = None) -> FinalReport:
        """执行一次完整的查找复制

        Args:
            request: 请求
            on_progress: 进度回调，可能在扫描线程中被调用

        Returns:
            FinalReport: 汇总报告

        Raises:
            InvalidPathError: 根目录或目标目录无效，扫描前抛出
            InputReadError: 名单文件无法读取，扫描前抛出
        """
        aggregator = ProgressAggregator()
        self.aggregator = aggregator
        if on_progress is not None:
            aggregator.subscribe(on_progress)
        aggregator.start()

        self.validate(request)
        names = to_name_set(load_target_names(request.name_list_path))
        if not names:
            logger.warning("名单为空，不会命中任何文件")
        aggregator.set_roots(request.roots)

        aggregator.transition(RunState.SCANNING)
        scanner = ConcurrentScanner(
            aggregator,
            path_filter=self.make_path_filter(request.exclude_system_folders),
            home=request.home,
            tree=self.tree,
            batch_size=self.config.progress_batch,
        )
        scanner.scan(request.roots, names)

        aggregator.transition(RunState.COPYING)
        copier = Copier(aggregator, collision_policy=request.collision_policy)
        copier.copy_all(aggregator.matches, request.destination)

        aggregator.transition(RunState.DONE)
        report = aggregator.final_report()
        logger.info(
            f"运行结束: 扫描 {report.files_scanned}，复制 {report.files_copied}，"
            f"失败 {report.failed_copies}，耗时 {report.elapsed_seconds:.2f} 秒"
        )
        return report
