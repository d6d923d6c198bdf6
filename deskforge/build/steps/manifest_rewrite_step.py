"""
清单改写步骤模块
"""

from ...utils.logging import LogStage, debug
from ..build_context import BuildContext, ManifestRewriteError
from ..manifest import ManifestError, rewrite_manifest
from .build_step import BuildStep


class ManifestRewriteStep(BuildStep):
    """按配置改写原生清单"""

    def __init__(self):
        super().__init__("manifest", "改写原生清单")

    def get_progress_range(self) -> tuple[int, int]:
        return (10, 15)

    def execute(self, context: BuildContext) -> None:
        config = context.require_config().snapshot()
        try:
            context.manifest = rewrite_manifest(config, context.project_dir)
        except (ManifestError, OSError) as e:
            raise ManifestRewriteError(f"改写清单失败: {e}") from e

        debug(f"清单: name={context.manifest.name} version={context.manifest.version}", stage=LogStage.MANIFEST)
