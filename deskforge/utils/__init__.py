"""通用工具模块"""

from .logging import (
    LogStage,
    OutputLevel,
    configure_logging,
    set_log_file,
    set_log_level,
)
from .paths import (
    ensure_directory,
    format_size,
    resolve_against,
)
from .process import ProcessExecutionError, execute_with_output

__all__ = [
    # 日志相关
    "LogStage",
    "OutputLevel",
    "configure_logging",
    "set_log_file",
    "set_log_level",

    # 路径相关
    "ensure_directory",
    "format_size",
    "resolve_against",

    # 子进程
    "ProcessExecutionError",
    "execute_with_output",
]
