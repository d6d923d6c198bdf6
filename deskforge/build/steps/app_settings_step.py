"""
应用设置步骤模块
"""

from ...utils.logging import LogStage, debug
from ..app_settings import AppSettings
from ..build_context import BuildContext
from .build_step import BuildStep


class AppSettingsStep(BuildStep):
    """解析包元数据和编译输出目录"""

    def __init__(self):
        super().__init__("settings", "解析应用设置")

    def get_progress_range(self) -> tuple[int, int]:
        return (70, 75)

    def execute(self, context: BuildContext) -> None:
        config = context.require_config().snapshot()
        context.app_settings = AppSettings.load(config, context.manifest, context.project_dir)
        context.out_dir = context.app_settings.get_out_dir(context.options.debug, context.target)

        binary_name = context.services.platform.binary_name(context.app_settings.package_name)
        context.binary_path = context.out_dir / binary_name
        debug(f"输出目录: {context.out_dir}", stage=LogStage.SETTINGS)
