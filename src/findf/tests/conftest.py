import errno
from pathlib import Path
from typing import Dict, Iterable, List

import pytest
from loguru import logger

from findf.core.errors import TraversalSkip
from findf.core.file_tree import FileTree, TreeEntry


class MemoryFileTree(FileTree):
    """内存中的目录树，用于在不接触真实磁盘的情况下测试遍历"""

    def __init__(self, files: Iterable[str] = (), dirs: Iterable[str] = (), unreadable: Iterable[str] = ()):
        self.children: Dict[str, Dict[str, bool]] = {"/": {}}
        self.unreadable = set(unreadable)
        self.listed: List[str] = []
        for d in dirs:
            self.add_dir(d)
        for f in files:
            self.add_file(f)

    def add_dir(self, path: str) -> None:
        path = str(Path(path))
        if path in self.children:
            return
        parent = str(Path(path).parent)
        self.add_dir(parent)
        self.children[parent][path] = True
        self.children[path] = {}

    def add_file(self, path: str) -> None:
        path = str(Path(path))
        parent = str(Path(path).parent)
        self.add_dir(parent)
        self.children[parent][path] = False

    def is_dir(self, path: Path) -> bool:
        return str(path) in self.children

    def list_dir(self, path: Path) -> List[TreeEntry]:
        key = str(path)
        self.listed.append(key)
        if key in self.unreadable:
            raise TraversalSkip(path, PermissionError(errno.EACCES, "Permission denied"))
        if key not in self.children:
            raise TraversalSkip(path, FileNotFoundError(errno.ENOENT, "No such file or directory"))
        return [
            TreeEntry(Path(child), is_dir, not is_dir)
            for child, is_dir in sorted(self.children[key].items())
        ]


@pytest.fixture(autouse=True)
def reset_logger():
    """CLI 测试会添加 loguru 处理器，每个测试后清理"""
    yield
    logger.remove()


@pytest.fixture
def memory_tree():
    return MemoryFileTree


@pytest.fixture
def make_tree(tmp_path):
    """在 tmp_path 下创建文件，返回根目录"""
    def _make(files: Dict[str, bytes], root_name: str = "root") -> Path:
        root = tmp_path / root_name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        return root
    return _make


@pytest.fixture
def name_list(tmp_path):
    """写入名单文件，返回路径"""
    def _write(names: Iterable[str], filename: str = "names.txt") -> Path:
        path = tmp_path / filename
        path.write_text("\n".join(names) + "\n", encoding="utf-8")
        return path
    return _write
