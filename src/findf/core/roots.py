"""
根目录发现模块 - 家目录加上所有已挂载的卷
"""
import os
import sys
from pathlib import Path
from typing import List, Optional

import psutil
from loguru import logger

# 只有拥有"完全磁盘访问权限"时才能列出的目录
TCC_PROBE_PATH = Path("/Library/Application Support/com.apple.TCC")


def mounted_volumes() -> List[Path]:
    """列出当前已挂载卷的挂载点"""
    volumes = []
    try:
        partitions = psutil.disk_partitions(all=False)
    except (OSError, RuntimeError) as e:
        logger.warning(f"无法枚举挂载卷: {e}")
        return volumes

    for part in partitions:
        mountpoint = Path(part.mountpoint)
        if mountpoint.is_dir():
            volumes.append(mountpoint)
        else:
            logger.debug(f"跳过不可访问的挂载点: {part.mountpoint}")
    return volumes


def discover_roots(home: Optional[Path] = None) -> List[Path]:
    """
    获取要扫描的根目录：家目录在前，其后是所有挂载卷，去重

    Args:
        home: 家目录，默认当前用户家目录

    Returns:
        List[Path]: 根目录列表
    """
    home = home or Path.home()
    roots = []
    seen = set()
    for candidate in [home] + mounted_volumes():
        key = os.path.normpath(str(candidate))
        if key in seen:
            continue
        seen.add(key)
        roots.append(candidate)

    logger.info(f"发现 {len(roots)} 个根目录: {', '.join(str(r) for r in roots)}")
    return roots


def has_full_disk_access(probe_path: Path = TCC_PROBE_PATH) -> bool:
    """
    检查是否拥有 macOS 的完全磁盘访问权限，其他系统总是返回 True
    """
    if sys.platform != "darwin":
        return True
    try:
        os.listdir(probe_path)
        return True
    except OSError:
        return False
