"""
产物重命名步骤模块
"""

from ...utils.logging import LogStage, debug, success
from ..build_context import BuildContext, RenameError
from .build_step import BuildStep


class ArtifactRenameStep(BuildStep):
    """把编译出的二进制文件改名为产品名"""

    def __init__(self):
        super().__init__("rename", "重命名二进制文件")

    def get_progress_range(self) -> tuple[int, int]:
        return (75, 80)

    def execute(self, context: BuildContext) -> None:
        settings = context.app_settings
        product_name = settings.product_name
        if not product_name or product_name == settings.package_name:
            debug("未配置不同的产品名，跳过重命名", stage=LogStage.RENAME)
            return

        platform = context.services.platform
        source = context.binary_path
        destination = context.out_dir / platform.binary_name(product_name)

        if not source.is_file():
            raise RenameError(f"找不到编译产物: {source}")

        try:
            source.replace(destination)
        except OSError as e:
            raise RenameError(f"无法重命名 {source.name} -> {destination.name}: {e}") from e

        context.binary_path = destination
        success(f"二进制文件已重命名: {destination.name}", stage=LogStage.RENAME)
