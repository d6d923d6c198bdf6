"""配置和 Schema 模块

提供构建配置的查找、加载、验证，以及加锁的只读配置快照。
"""

from .schema import AppConfig
from .loader import (
    CONFIG_FILENAMES,
    ConfigError,
    ConfigHandle,
    ConfigLoader,
    ConfigValidationError,
    config_loader,
    find_config,
    load_config,
    validate_config,
)

__all__ = [
    # 主要类
    "AppConfig",
    "ConfigHandle",
    "ConfigLoader",

    # 异常类
    "ConfigError",
    "ConfigValidationError",

    # 便捷函数
    "find_config",
    "load_config",
    "validate_config",

    # 常量与单例
    "CONFIG_FILENAMES",
    "config_loader",
]
