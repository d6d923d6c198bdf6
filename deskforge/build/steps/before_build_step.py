"""
前置命令步骤模块
"""

from ...utils.logging import LogStage, debug, success
from ..build_context import BuildContext
from .build_step import BuildStep


class BeforeBuildStep(BuildStep):
    """执行 build.beforeBuildCommand"""

    def __init__(self):
        super().__init__("hook", "执行前置命令")

    def get_progress_range(self) -> tuple[int, int]:
        return (15, 25)

    def execute(self, context: BuildContext) -> None:
        # 只在读取时持锁，执行外部命令前释放
        with context.require_config().read() as config:
            command = config.build.before_build_command

        if not command:
            debug("未配置前置命令，跳过", stage=LogStage.HOOK)
            return

        context.report_progress("前置命令", self.get_progress_range()[0], command)
        context.services.hook_runner(command, context.app_dir, context.services.platform)
        success("前置命令执行完成", stage=LogStage.HOOK)
