"""
构建上下文模块

定义构建过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config.loader import ConfigHandle
    from .app_settings import AppSettings
    from .bundler import Bundle
    from .manifest import Manifest
    from .services import BuildServices
    from .signer import SignedArtifact

# 进度回调类型: (阶段, 当前, 总数, 消息)
ProgressCallback = Callable[[str, int, int, str], None]


class BuildError(Exception):
    """构建错误基类，所有阶段错误都继承自它"""
    pass


class ConfigLoadError(BuildError):
    """配置缺失或无法解析"""
    pass


class WorkingDirectoryError(BuildError):
    """无法切换到项目根目录"""
    pass


class ManifestRewriteError(BuildError):
    """原生清单读取或改写失败"""
    pass


class PreBuildHookError(BuildError):
    """前置命令退出码非零"""

    def __init__(self, command: str, output: str = "", returncode: Optional[int] = None):
        self.command = command
        self.output = output
        self.returncode = returncode
        super().__init__(f"前置命令执行失败: `{command}` (退出码 {returncode})")


class MissingWebAssetsError(BuildError):
    """distDir 指向的目录不存在"""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"找不到前端构建产物，是否忘记先构建前端？distDir 当前设置为 \"{path}\""
        )


class CompileError(BuildError):
    """原生编译失败"""
    pass


class AppSettingsError(BuildError):
    """包元数据缺失或格式错误"""
    pass


class RenameError(BuildError):
    """二进制重命名失败"""
    pass


class UnsupportedBundleFormatError(BuildError):
    """无法识别的打包格式短名"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"不支持的打包格式: {name}")


class BundleError(BuildError):
    """打包引擎失败"""
    pass


class SigningError(BuildError):
    """updater 产物签名失败"""
    pass


@dataclass(frozen=True)
class BuildOptions:
    """一次构建请求的选项，由 Build 构造器生成"""
    runner: Optional[str] = None
    debug: bool = False
    verbose: bool = False
    target: Optional[str] = None
    bundles: Optional[List[str]] = None
    config_path: Optional[Path] = None


@dataclass
class BuildContext:
    """构建上下文，包含构建过程中的共享数据"""
    options: BuildOptions
    services: 'BuildServices'
    progress_callback: Optional[ProgressCallback] = None

    # 路径
    invocation_dir: Path = field(default_factory=Path.cwd)
    project_dir: Optional[Path] = None
    app_dir: Optional[Path] = None

    # 构建过程中生成的数据
    config: Optional['ConfigHandle'] = None
    manifest: Optional['Manifest'] = None
    runner: Optional[str] = None
    target: Optional[str] = None
    app_settings: Optional['AppSettings'] = None
    out_dir: Optional[Path] = None
    binary_path: Optional[Path] = None
    bundles: List['Bundle'] = field(default_factory=list)
    signed_artifacts: List['SignedArtifact'] = field(default_factory=list)

    # 统计信息
    build_stats: Dict[str, Any] = field(default_factory=lambda: {
        'start_time': 0,
        'end_time': 0,
        'steps': [],
    })

    def report_progress(self, stage: str, current: int, message: str = "") -> None:
        """调用进度回调（如果有）"""
        if self.progress_callback:
            self.progress_callback(stage, current, 100, message)

    def require_config(self) -> 'ConfigHandle':
        if self.config is None:
            raise BuildError("配置尚未加载")
        return self.config
