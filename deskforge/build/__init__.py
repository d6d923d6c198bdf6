"""构建服务模块

提供发布构建管道：编译、重命名、打包与 updater 签名。
"""

from .builder import Build
from .build_context import (
    AppSettingsError,
    BuildContext,
    BuildError,
    BuildOptions,
    BundleError,
    CompileError,
    ConfigLoadError,
    ManifestRewriteError,
    MissingWebAssetsError,
    PreBuildHookError,
    RenameError,
    SigningError,
    UnsupportedBundleFormatError,
    WorkingDirectoryError,
)
from .build_pipeline import BuildPipeline
from .bundler import (
    Bundle,
    BundlerEngine,
    DefaultBundler,
    PackageType,
    Settings,
    resolve_package_types,
)
from .compiler import CompilerInvoker, NativeCompiler
from .platform import PlatformPolicy, current_platform
from .services import BuildServices
from .signer import SignedArtifact, sign_file_from_env_variables

__all__ = [
    # 主构建器
    "Build",
    "BuildPipeline",
    "BuildContext",
    "BuildOptions",
    "BuildServices",

    # 异常
    "BuildError",
    "ConfigLoadError",
    "WorkingDirectoryError",
    "ManifestRewriteError",
    "PreBuildHookError",
    "MissingWebAssetsError",
    "CompileError",
    "AppSettingsError",
    "RenameError",
    "UnsupportedBundleFormatError",
    "BundleError",
    "SigningError",

    # 协作者
    "Bundle",
    "BundlerEngine",
    "DefaultBundler",
    "PackageType",
    "Settings",
    "resolve_package_types",
    "CompilerInvoker",
    "NativeCompiler",
    "PlatformPolicy",
    "current_platform",
    "SignedArtifact",
    "sign_file_from_env_variables",
]
