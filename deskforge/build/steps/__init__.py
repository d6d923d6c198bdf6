"""构建步骤"""

from .build_step import BuildStep
from .config_loading_step import ConfigLoadingStep
from .working_directory_step import WorkingDirectoryStep
from .manifest_rewrite_step import ManifestRewriteStep
from .before_build_step import BeforeBuildStep
from .asset_check_step import AssetCheckStep
from .compilation_step import CompilationStep
from .app_settings_step import AppSettingsStep
from .rename_step import ArtifactRenameStep
from .bundling_step import BundlingStep
from .signing_step import UpdaterSigningStep

__all__ = [
    "BuildStep",
    "ConfigLoadingStep",
    "WorkingDirectoryStep",
    "ManifestRewriteStep",
    "BeforeBuildStep",
    "AssetCheckStep",
    "CompilationStep",
    "AppSettingsStep",
    "ArtifactRenameStep",
    "BundlingStep",
    "UpdaterSigningStep",
]
