"""
原生编译调用

编译只报告成功或失败；产物位置由 AppSettings 按工具链约定推算。
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from ..utils.logging import LogStage, info
from ..utils.process import execute_with_output

DEFAULT_RUNNER = "cargo"


class CompilerInvoker(ABC):
    """原生编译接口"""

    @abstractmethod
    def build_project(self, runner: str, target: Optional[str], debug: bool,
                      features: Sequence[str] = ()) -> None:
        """执行一次编译，失败时抛出异常"""
        pass


class NativeCompiler(CompilerInvoker):
    """通过 ``<runner> build`` 调用 cargo 兼容的构建工具

    Args:
        cwd: 编译工作目录，缺省为当前目录（管道已切换到项目根目录）
    """

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = cwd

    def command(self, runner: str, target: Optional[str], debug: bool,
                features: Sequence[str] = ()) -> List[str]:
        """拼出编译命令"""
        args = [runner, "build"]
        if features:
            args.append(f"--features={','.join(features)}")
        if not debug:
            args.append("--release")
        if target:
            args.extend(["--target", target])
        return args

    def build_project(self, runner: str, target: Optional[str], debug: bool,
                      features: Sequence[str] = ()) -> None:
        args = self.command(runner, target, debug, features)
        info(f"执行: {' '.join(args)}", stage=LogStage.COMPILE)
        execute_with_output(args, cwd=self.cwd, stage=LogStage.COMPILE)
