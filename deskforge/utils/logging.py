"""
构建输出

基于 Rich Console 的输出门面。每条消息带时间、级别和构建阶段；
ERROR 写入 stderr，其余写入 stdout，并可同时追加到日志文件。
"""

import atexit
import builtins
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO, Union

from rich.console import Console
from rich.markup import escape


class OutputLevel:
    """输出级别"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogStage:
    """构建阶段，与管道步骤对应"""
    INIT = "INIT"
    CONFIG = "CONFIG"
    MANIFEST = "MANIFEST"
    HOOK = "HOOK"
    ASSETS = "ASSETS"
    COMPILE = "COMPILE"
    SETTINGS = "SETTINGS"
    RENAME = "RENAME"
    BUNDLE = "BUNDLE"
    SIGN = "SIGN"
    BUILD = "BUILD"
    DONE = "DONE"


# 级别 -> (过滤阈值, Rich 样式)
_LEVELS = {
    OutputLevel.DEBUG: (0, "dim"),
    OutputLevel.INFO: (1, None),
    OutputLevel.SUCCESS: (1, "green"),
    OutputLevel.WARNING: (2, "yellow"),
    OutputLevel.ERROR: (3, "bold red"),
}


class OutputFacade:
    """构建输出门面"""

    def __init__(self):
        self._lock = threading.RLock()
        # 不绑定文件对象，输出时取当前的 sys.stdout / sys.stderr
        self._stdout = Console(highlight=False)
        self._stderr = Console(stderr=True, highlight=False)
        self._log_file: Optional[TextIO] = None
        self.level = OutputLevel.INFO

    def enabled(self, level: str) -> bool:
        return _LEVELS[level][0] >= _LEVELS[self.level][0]

    def emit(self, level: str, message: str, stage: Optional[str] = None) -> None:
        """输出一条消息；消息按原文显示，不解析 Rich 标记"""
        if not self.enabled(level):
            return

        now = datetime.now()
        tag = f"{level} {stage}" if stage else level
        markup = f"[dim]{now:%H:%M:%S}[/dim] [bold]{level}[/bold]"
        if stage:
            markup += f" [cyan]{stage}[/cyan]"

        with self._lock:
            console = self._stderr if level == OutputLevel.ERROR else self._stdout
            console.print(f"{markup} {escape(message)}", style=_LEVELS[level][1])
            self._append(f"{now:%Y-%m-%d %H:%M:%S} {tag} {message}")

    def echo(self, text: str) -> None:
        """不带时间戳的原样输出"""
        with self._lock:
            builtins.print(text)
            self._append(text)

    def _append(self, line: str) -> None:
        if self._log_file is None:
            return
        self._log_file.write(line + "\n")
        self._log_file.flush()

    def set_level(self, level: str) -> None:
        if level not in _LEVELS:
            raise ValueError(f"未知的输出级别: {level}")
        self.level = level

    def open_log_file(self, file_path: Union[str, Path]) -> None:
        """追加写入日志文件，替换之前打开的文件"""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            self.close()
            self._log_file = open(path, 'a', encoding='utf-8')

    def close(self) -> None:
        with self._lock:
            if self._log_file is not None:
                self._log_file.close()
                self._log_file = None


_facade: Optional[OutputFacade] = None
_facade_lock = threading.Lock()


def get_output_facade() -> OutputFacade:
    global _facade
    with _facade_lock:
        if _facade is None:
            _facade = OutputFacade()
        return _facade


def debug(message: str, stage: Optional[str] = None) -> None:
    get_output_facade().emit(OutputLevel.DEBUG, message, stage)


def info(message: str, stage: Optional[str] = None) -> None:
    get_output_facade().emit(OutputLevel.INFO, message, stage)


def success(message: str, stage: Optional[str] = None) -> None:
    get_output_facade().emit(OutputLevel.SUCCESS, message, stage)


def warning(message: str, stage: Optional[str] = None) -> None:
    get_output_facade().emit(OutputLevel.WARNING, message, stage)


def error(message: str, stage: Optional[str] = None) -> None:
    get_output_facade().emit(OutputLevel.ERROR, message, stage)


def print(*args) -> None:
    """原样输出一行，用于产物路径之类需要直接复制的内容"""
    get_output_facade().echo(" ".join(str(arg) for arg in args))


def set_log_level(level: str) -> None:
    get_output_facade().set_level(level)


def set_log_file(file_path: Union[str, Path]) -> None:
    get_output_facade().open_log_file(file_path)


def configure_logging(level: str = OutputLevel.INFO,
                      log_file: Optional[Union[str, Path]] = None) -> None:
    """一次性设置输出级别和日志文件"""
    set_log_level(level)
    if log_file:
        set_log_file(log_file)


def close_logger() -> None:
    global _facade
    with _facade_lock:
        if _facade is not None:
            _facade.close()
            _facade = None


atexit.register(close_logger)
