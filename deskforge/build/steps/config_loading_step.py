"""
配置加载步骤模块

加载配置文件并确定项目根目录与前置命令工作目录。
"""

from ...config.loader import ConfigError
from ...utils import resolve_against
from ...utils.logging import LogStage, info, success
from ..build_context import BuildContext, ConfigLoadError
from .build_step import BuildStep


class ConfigLoadingStep(BuildStep):
    """配置加载步骤"""

    def __init__(self):
        super().__init__("config", "加载构建配置")

    def get_progress_range(self) -> tuple[int, int]:
        return (0, 5)

    def execute(self, context: BuildContext) -> None:
        config_path = context.options.config_path
        if config_path:
            info(f"加载配置文件: {config_path}", stage=LogStage.CONFIG)
        else:
            info(f"在 {context.invocation_dir} 中查找配置文件", stage=LogStage.CONFIG)

        try:
            handle = context.services.config_loader.load(config_path, start=context.invocation_dir)
        except ConfigError as e:
            raise ConfigLoadError(f"无法加载配置: {e}") from e

        context.config = handle
        context.project_dir = handle.project_dir

        with handle.read() as config:
            app_dir = config.build.app_dir

        if app_dir:
            context.app_dir = resolve_against(app_dir, context.project_dir)
        else:
            context.app_dir = context.invocation_dir

        success(f"配置已加载: {handle.path}", stage=LogStage.CONFIG)
