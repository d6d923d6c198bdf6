"""
子进程执行工具

同步执行外部命令，逐行实时输出并保留合并后的输出内容。
"""

import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .logging import info

# 每行输出回调
LineCallback = Callable[[str], None]


class ProcessExecutionError(Exception):
    """外部命令执行失败"""

    def __init__(self, args: Sequence[str], returncode: Optional[int], output: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"无法启动命令 `{' '.join(self.command)}`"
        else:
            message = f"命令 `{' '.join(self.command)}` 退出码 {returncode}"
        super().__init__(message)


def execute_with_output(
    args: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    on_line: Optional[LineCallback] = None,
    stage: Optional[str] = None,
) -> str:
    """执行命令并实时转发输出

    stdout 与 stderr 合并，逐行交给 on_line（默认写入日志门面），
    进程结束后返回完整输出。没有超时，子进程挂起时调用方也会挂起。

    Args:
        args: 命令及参数
        cwd: 工作目录
        on_line: 每行输出回调
        stage: 默认回调使用的日志阶段

    Returns:
        str: 合并后的完整输出

    Raises:
        ProcessExecutionError: 命令无法启动或退出码非零
    """
    if on_line is None:
        def on_line(line: str) -> None:
            info(line, stage=stage)

    lines: List[str] = []
    try:
        proc = subprocess.Popen(
            list(args),
            cwd=str(cwd) if cwd is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding='utf-8',
            errors='replace',
        )
    except OSError as e:
        raise ProcessExecutionError(args, None, str(e)) from e

    with proc:
        for line in iter(proc.stdout.readline, ''):
            line = line.rstrip('\r\n')
            lines.append(line)
            on_line(line)
        returncode = proc.wait()

    output = "\n".join(lines)
    if returncode != 0:
        raise ProcessExecutionError(args, returncode, output)
    return output
