"""
工作目录切换步骤模块
"""

import os

from ...utils.logging import LogStage, debug
from ..build_context import BuildContext, WorkingDirectoryError
from .build_step import BuildStep


class WorkingDirectoryStep(BuildStep):
    """切换到项目根目录（进程级副作用，构建结束后不恢复）"""

    def __init__(self):
        super().__init__("chdir", "切换到项目根目录")

    def get_progress_range(self) -> tuple[int, int]:
        return (5, 10)

    def execute(self, context: BuildContext) -> None:
        if context.project_dir is None:
            raise WorkingDirectoryError("项目根目录未知")

        try:
            os.chdir(context.project_dir)
        except OSError as e:
            raise WorkingDirectoryError(f"无法切换工作目录到 {context.project_dir}: {e}") from e

        debug(f"工作目录: {context.project_dir}", stage=LogStage.CONFIG)
