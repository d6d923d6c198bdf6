"""
前置命令执行

在编译前通过平台 shell 执行用户配置的 beforeBuildCommand。
"""

from pathlib import Path
from typing import Callable, Optional

from ..utils.logging import LogStage, info
from ..utils.process import ProcessExecutionError, execute_with_output
from .build_context import PreBuildHookError
from .platform import PlatformPolicy

# (命令, 工作目录, 平台) -> 合并输出
HookRunner = Callable[[Optional[str], Path, PlatformPolicy], Optional[str]]


def run_before_build(command: Optional[str], cwd: Path, platform: PlatformPolicy) -> Optional[str]:
    """执行前置命令，命令为空时不做任何事

    Returns:
        合并后的命令输出；未执行时返回 None

    Raises:
        PreBuildHookError: 命令无法启动或退出码非零
    """
    if not command or not command.strip():
        return None

    args = platform.shell_command(command)
    info(f"执行 `{command}`", stage=LogStage.HOOK)
    try:
        return execute_with_output(args, cwd=cwd, stage=LogStage.HOOK)
    except ProcessExecutionError as e:
        raise PreBuildHookError(command, e.output, e.returncode) from e
