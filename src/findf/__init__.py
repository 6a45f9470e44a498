"""
按文件名查找并复制文件的工具
在家目录和所有挂载卷中并发搜索名单里的文件名，把命中的文件平铺复制到目标目录
"""
from .config import FindfConfig, load_config
from .core.models import (
    SearchRequest,
    FinalReport,
    ProgressSnapshot,
    CopyError,
    RunState,
    CollisionPolicy,
)
from .core.errors import FindfError, InputReadError, InvalidPathError, ConfigError
from .core.engine import FileFinder

__version__ = "1.0.0"

__all__ = [
    # 入口
    'FileFinder',
    # 配置
    'FindfConfig',
    'load_config',
    # 数据模型
    'SearchRequest',
    'FinalReport',
    'ProgressSnapshot',
    'CopyError',
    'RunState',
    'CollisionPolicy',
    # 异常
    'FindfError',
    'InputReadError',
    'InvalidPathError',
    'ConfigError',
]
