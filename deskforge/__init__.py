"""
deskforge - 桌面应用发布构建编排工具

Release-build orchestrator for desktop applications: compile, rename,
bundle and sign updater artifacts.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .build.builder import Build
from .config.schema import AppConfig

__all__ = ["AppConfig", "Build", "__version__"]
