"""
目录读取模块 - 遍历器通过它列出目录内容，测试时可替换为内存中的目录树
"""
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .errors import TraversalSkip


@dataclass(frozen=True)
class TreeEntry:
    """目录中的一个条目"""
    path: Path
    is_dir: bool  # 不跟随符号链接
    is_file: bool  # 跟随符号链接，悬空链接为 False

    @property
    def name(self) -> str:
        return self.path.name


class FileTree(ABC):
    """列出目录内容的接口"""

    @abstractmethod
    def list_dir(self, path: Path) -> List[TreeEntry]:
        """列出目录的直接子条目

        Raises:
            TraversalSkip: 目录无法读取（权限不足、已被删除等）
        """

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """路径是否为可遍历的目录"""


class LocalFileTree(FileTree):
    """基于 os.scandir 的本地文件系统实现"""

    def is_dir(self, path: Path) -> bool:
        return os.path.isdir(path)

    def list_dir(self, path: Path) -> List[TreeEntry]:
        entries = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    try:
                        is_dir = entry.is_dir(follow_symlinks=False)
                        is_file = not is_dir and entry.is_file()
                    except OSError:
                        # 单个条目无法 stat 时按普通条目处理，不会被匹配也不会进入
                        is_dir = is_file = False
                    entries.append(TreeEntry(Path(entry.path), is_dir, is_file))
        except OSError as e:
            raise TraversalSkip(path, e) from e
        return entries
