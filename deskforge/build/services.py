"""
构建服务

管道依赖的外部协作者集中在这里，测试时可整体替换。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from ..config.loader import ConfigLoader, config_loader
from .bundler import BundlerEngine, DefaultBundler
from .compiler import CompilerInvoker, NativeCompiler
from .hook import HookRunner, run_before_build
from .platform import PlatformPolicy, current_platform
from .signer import SignedArtifact, sign_file_from_env_variables

# (产物路径, 配置中的公钥) -> 签名结果
Signer = Callable[[Path, Optional[str]], SignedArtifact]


@dataclass
class BuildServices:
    """管道使用的编译器、打包引擎、签名器、平台策略等"""
    compiler: CompilerInvoker = field(default_factory=NativeCompiler)
    bundler: BundlerEngine = field(default_factory=DefaultBundler)
    signer: Signer = sign_file_from_env_variables
    platform: PlatformPolicy = field(default_factory=current_platform)
    hook_runner: HookRunner = run_before_build
    config_loader: ConfigLoader = config_loader
