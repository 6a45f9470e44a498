"""
路径过滤器模块

决定遍历时哪些目录整体跳过（系统文件夹、包目录），哪些路径视为隐藏
"""
from pathlib import Path, PurePosixPath
from typing import Iterable, Union

from loguru import logger

from ..config import SYSTEM_FOLDER_PREFIXES, PACKAGE_EXTENSIONS

PathLike = Union[str, Path]


class PathFilter:
    """路径过滤器类"""

    def __init__(
        self,
        prefixes: Iterable[str] = SYSTEM_FOLDER_PREFIXES,
        match_components: bool = False,
        package_extensions: Iterable[str] = PACKAGE_EXTENSIONS,
        enabled: bool = True,
    ):
        """
        初始化路径过滤器

        参数:
        prefixes: 系统文件夹前缀列表
        match_components: 为 True 时按路径组件匹配前缀，否则按字符串前缀匹配
                          （字符串匹配下 /usrlocal 也会命中 /usr）
        package_extensions: 包目录扩展名
        enabled: 为 False 时不做任何过滤
        """
        self.prefixes = tuple(prefixes)
        self.match_components = match_components
        self.package_extensions = tuple(ext.lower() for ext in package_extensions)
        self.enabled = enabled
        if enabled:
            logger.debug(f"路径过滤已启用，{len(self.prefixes)} 个系统前缀，组件匹配: {match_components}")

    @classmethod
    def disabled(cls) -> "PathFilter":
        """不做任何过滤的实例"""
        return cls(prefixes=(), package_extensions=(), enabled=False)

    def is_pruned(self, path: PathLike) -> bool:
        """
        检查目录是否属于系统文件夹，命中时整棵子树都不遍历

        参数:
        path: 要检查的路径

        返回:
        bool: 是否跳过
        """
        if not self.enabled:
            return False
        path_str = str(path)
        for prefix in self.prefixes:
            if self.match_components:
                if path_str == prefix or path_str.startswith(prefix.rstrip("/") + "/"):
                    return True
            elif path_str.startswith(prefix):
                return True
        return False

    def is_hidden(self, path: PathLike, home: PathLike) -> bool:
        """
        检查路径是否为隐藏路径

        任一组件以 "." 开头且路径不在家目录下时视为隐藏，
        家目录下的点文件和点目录照常遍历。

        参数:
        path: 要检查的路径
        home: 家目录

        返回:
        bool: 是否隐藏
        """
        if not self.enabled:
            return False
        path_str = str(path)
        if path_str.startswith(str(home)):
            return False
        return any(part.startswith(".") for part in PurePosixPath(path_str).parts)

    def is_package(self, path: PathLike) -> bool:
        """检查目录是否为包目录（如 .app），包目录不进入内部"""
        if not self.enabled or not self.package_extensions:
            return False
        return PurePosixPath(str(path)).suffix.lower() in self.package_extensions
