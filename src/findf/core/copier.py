"""
文件复制模块 - 把命中文件顺序复制到目标目录（扁平）
"""
import shutil
from pathlib import Path
from typing import Sequence

from loguru import logger

from .models import CollisionPolicy, CopyError
from .progress import ProgressAggregator


def unique_path(dest: Path) -> Path:
    """
    如果 dest 已存在，在扩展名前追加 ' (1)'、' (2)' ...
    返回一个不存在的路径
    """
    if not dest.exists():
        return dest

    stem = dest.stem
    suffix = dest.suffix
    parent = dest.parent
    i = 1
    while True:
        candidate = parent / f"{stem} ({i}){suffix}"
        if not candidate.exists():
            return candidate
        i += 1


class Copier:
    """文件复制器类"""

    def __init__(
        self,
        aggregator: ProgressAggregator,
        collision_policy: CollisionPolicy = CollisionPolicy.OVERWRITE,
    ):
        self.aggregator = aggregator
        self.collision_policy = collision_policy

    def copy_all(self, files: Sequence[Path], destination: Path) -> None:
        """
        按顺序复制所有文件，单个文件失败只记录，不中断批次

        Args:
            files: 源文件列表
            destination: 目标目录（必须已存在）
        """
        if not files:
            logger.warning("没有需要复制的文件")
            return

        logger.info(f"开始复制 {len(files)} 个文件到 {destination}，同名处理: {self.collision_policy.value}")

        for source in files:
            try:
                target = self._copy_one(source, destination)
            except (OSError, shutil.Error) as e:
                cause = getattr(e, "strerror", None) or str(e) or type(e).__name__
                logger.error(f"错误: 复制文件 '{source}' 到 '{destination}' 时出错: {cause}")
                self.aggregator.record_failure(CopyError(path=source, cause=cause))
            else:
                logger.debug(f"已复制: {source} -> {target}")
                self.aggregator.record_copied()

        snap = self.aggregator.snapshot()
        logger.info("复制总结:")
        logger.info(f"  成功复制: {snap.files_copied} 个文件")
        if snap.failed_copies > 0:
            logger.error(f"  遇到错误: {snap.failed_copies} 个文件")
        else:
            logger.info("  遇到错误: 0 个文件")

    def _copy_one(self, source: Path, destination: Path) -> Path:
        target = destination / source.name

        if target.is_dir():
            raise IsADirectoryError(f"目标是同名文件夹: {target}")
        if target.exists():
            if target.resolve() == source.resolve():
                raise shutil.SameFileError(f"源文件就是目标文件: {source}")
            if self.collision_policy is CollisionPolicy.FAIL:
                raise FileExistsError(f"目标已存在: {target}")
            if self.collision_policy is CollisionPolicy.RENAME:
                target = unique_path(target)
            else:
                logger.warning(f"覆盖同名文件: {target} (来源 {source})")

        shutil.copy2(source, target)
        return target
