"""
前端产物检查步骤模块
"""

from ...utils import resolve_against
from ...utils.logging import LogStage, debug
from ..build_context import BuildContext, MissingWebAssetsError
from .build_step import BuildStep


class AssetCheckStep(BuildStep):
    """确认 build.distDir 存在"""

    def __init__(self):
        super().__init__("assets", "检查前端构建产物")

    def get_progress_range(self) -> tuple[int, int]:
        return (25, 30)

    def execute(self, context: BuildContext) -> None:
        with context.require_config().read() as config:
            dist_dir = config.build.dist_dir

        web_asset_path = resolve_against(dist_dir, context.project_dir)
        if not web_asset_path.exists():
            raise MissingWebAssetsError(web_asset_path)

        debug(f"前端产物目录: {web_asset_path}", stage=LogStage.ASSETS)
