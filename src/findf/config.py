"""
程序全局配置模块

默认值写在模块常量里，可以用 ~/.findf/config.toml 中的 [findf] 表覆盖
"""
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Tuple

import tomli
from loguru import logger

from .core.errors import ConfigError
from .core.models import CollisionPolicy

# 开启"排除系统文件夹"时整体跳过的路径前缀
SYSTEM_FOLDER_PREFIXES = (
    "/System",
    "/private",
    "/sbin",
    "/usr",
    "/bin",
    "/cores",
    "/etc",
    "/opt",
    "/tmp",
    "/var",
)

# 包目录（macOS bundle），排除系统文件夹时不进入其内部
PACKAGE_EXTENSIONS = (
    ".app",
    ".bundle",
    ".framework",
    ".plugin",
    ".kext",
    ".pkg",
    ".photoslibrary",
    ".musiclibrary",
    ".xcodeproj",
    ".xcworkspace",
)

# 默认配置文件和日志目录
DEFAULT_CONFIG_PATH = Path.home() / ".findf" / "config.toml"
DEFAULT_LOG_DIR = Path.home() / ".findf" / "logs"

# 扫描计数每累计多少条提交一次
DEFAULT_PROGRESS_BATCH = 256


@dataclass(frozen=True)
class FindfConfig:
    exclude_system_folders: bool = True
    system_prefixes: Tuple[str, ...] = SYSTEM_FOLDER_PREFIXES
    match_components: bool = False
    package_extensions: Tuple[str, ...] = PACKAGE_EXTENSIONS
    collision_policy: CollisionPolicy = CollisionPolicy.OVERWRITE
    progress_batch: int = DEFAULT_PROGRESS_BATCH
    log_dir: Path = field(default=DEFAULT_LOG_DIR)

    def with_overrides(self, **overrides) -> "FindfConfig":
        """返回覆盖了非 None 字段的新配置"""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


def _string_list(value, key: str, source: Path) -> List[str]:
    """校验配置值是字符串列表"""
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{source}: {key} 必须是字符串列表")
    return value


def _parse_section(section: dict, source: Path) -> FindfConfig:
    """把 [findf] 表转换为 FindfConfig

    Args:
        section: TOML 中的 findf 表
        source: 配置文件路径，仅用于错误信息

    Returns:
        FindfConfig: 解析后的配置
    """
    values = {}
    known = set(FindfConfig.__dataclass_fields__)
    for key, value in section.items():
        if key not in known:
            raise ConfigError(f"{source}: 未知配置项 '{key}'")
        values[key] = value

    try:
        if "exclude_system_folders" in values and not isinstance(values["exclude_system_folders"], bool):
            raise ConfigError(f"{source}: exclude_system_folders 必须是布尔值")
        if "match_components" in values and not isinstance(values["match_components"], bool):
            raise ConfigError(f"{source}: match_components 必须是布尔值")
        if "system_prefixes" in values:
            values["system_prefixes"] = tuple(_string_list(values["system_prefixes"], "system_prefixes", source))
        if "package_extensions" in values:
            values["package_extensions"] = tuple(
                e.lower() for e in _string_list(values["package_extensions"], "package_extensions", source)
            )
        if "collision_policy" in values:
            values["collision_policy"] = CollisionPolicy(str(values["collision_policy"]).lower())
        if "progress_batch" in values:
            batch = values["progress_batch"]
            # bool 是 int 的子类，需要单独排除
            if isinstance(batch, bool) or not isinstance(batch, int):
                raise ConfigError(f"{source}: progress_batch 必须是整数")
            if batch < 1:
                raise ConfigError(f"{source}: progress_batch 必须大于 0")
            values["progress_batch"] = batch
        if "log_dir" in values:
            values["log_dir"] = Path(values["log_dir"]).expanduser()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{source}: 配置值无效: {e}") from e

    return FindfConfig(**values)


def load_config(path: Optional[Path] = None) -> FindfConfig:
    """加载配置文件

    Args:
        path: 配置文件路径，为 None 时使用 ~/.findf/config.toml（不存在则用默认值）

    Returns:
        FindfConfig: 配置
    """
    explicit = path is not None
    config_path = Path(path).expanduser() if explicit else DEFAULT_CONFIG_PATH

    if not config_path.is_file():
        if explicit:
            raise ConfigError(f"配置文件不存在: {config_path}")
        logger.debug(f"未找到配置文件 {config_path}，使用默认配置")
        return FindfConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        raise ConfigError(f"无法解析配置文件 {config_path}: {e}") from e

    section = data.get("findf", {})
    if not isinstance(section, dict):
        raise ConfigError(f"{config_path}: [findf] 必须是表")

    config = _parse_section(section, config_path)
    logger.info(f"已加载配置文件: {config_path}")
    return config
