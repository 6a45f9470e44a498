"""
名单加载模块 - 从文本文件读取要查找的文件名
"""
from pathlib import Path
from typing import Iterable, List

from loguru import logger

from .errors import InputReadError
from .models import TargetNameSet


def load_target_names(path: Path) -> List[str]:
    """读取名单文件，每行一个文件名

    行尾空白会被去掉，空行忽略，保留原有顺序和重复项。

    Args:
        path: 名单文件路径

    Returns:
        List[str]: 文件名列表

    Raises:
        InputReadError: 文件不存在、无法读取或不是有效的 UTF-8
    """
    path = Path(path)
    try:
        # utf-8-sig 兼容带 BOM 的文件
        content = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise InputReadError(path, "文件不存在") from e
    except UnicodeDecodeError as e:
        raise InputReadError(path, "不是有效的 UTF-8 文本") from e
    except OSError as e:
        raise InputReadError(path, e.strerror or str(e)) from e

    names = []
    # 只按换行符分行，名字中的其他控制字符保留
    for line in content.split("\n"):
        name = line.rstrip()
        if name:
            names.append(name)

    logger.info(f"从 {path} 读取了 {len(names)} 个文件名")
    return names


def to_name_set(names: Iterable[str]) -> TargetNameSet:
    return frozenset(names)
