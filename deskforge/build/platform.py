"""
平台策略

把随操作系统变化的行为集中在一个可注入的对象里：二进制文件后缀、
执行前置命令的 shell、默认打包格式、updater 归档格式以及 Windows
合并模块的放置。
"""

import os
import platform as _platform
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..utils.logging import LogStage, debug, info
from .bundler import PackageType

MERGE_MODULE_TEMPLATE = "Microsoft_VC142_CRT_{arch}.msm"


class PlatformPolicy(ABC):
    """平台相关行为"""

    name = "unknown"
    binary_suffix = ""
    archive_format = "gztar"

    def binary_name(self, name: str) -> str:
        """按平台约定拼出二进制文件名"""
        return f"{name}{self.binary_suffix}"

    @abstractmethod
    def shell_command(self, command: str) -> List[str]:
        """把命令字符串包装为平台 shell 调用"""
        pass

    @abstractmethod
    def default_package_types(self) -> List[PackageType]:
        """未显式指定格式时使用的打包格式（不含 updater）"""
        pass

    def stage_merge_modules(self, out_dir: Path, source_dir: Optional[Path],
                            target: Optional[str] = None) -> Optional[Path]:
        """把合并模块放到输出目录；非 Windows 平台无操作"""
        return None


class UnixPolicy(PlatformPolicy):
    """类 Unix 平台公共部分"""

    def shell_command(self, command: str) -> List[str]:
        return ["sh", "-c", command]


class LinuxPolicy(UnixPolicy):
    name = "linux"

    def default_package_types(self) -> List[PackageType]:
        return [PackageType.DEB, PackageType.APPIMAGE]


class MacPolicy(UnixPolicy):
    name = "macos"

    def default_package_types(self) -> List[PackageType]:
        return [PackageType.MACOS_BUNDLE, PackageType.DMG]


class WindowsPolicy(PlatformPolicy):
    """Windows 平台

    Args:
        host_machine: 宿主机架构，缺省取 platform.machine()
    """

    name = "windows"
    binary_suffix = ".exe"
    archive_format = "zip"

    def __init__(self, host_machine: Optional[str] = None):
        self.host_machine = host_machine or _platform.machine()

    def shell_command(self, command: str) -> List[str]:
        return ["cmd", "/C", command]

    def default_package_types(self) -> List[PackageType]:
        return [PackageType.MSI]

    def target_arch(self, target: Optional[str] = None) -> str:
        """返回 x86 或 x64：优先看目标三元组，否则看宿主机"""
        machine = target.split('-')[0] if target else self.host_machine
        if machine.lower() in ("x86", "i386", "i586", "i686"):
            return "x86"
        return "x64"

    def stage_merge_modules(self, out_dir: Path, source_dir: Optional[Path],
                            target: Optional[str] = None) -> Optional[Path]:
        """先删除另一架构的旧模块，再写入与目标架构匹配的模块

        Raises:
            FileNotFoundError: 找不到合并模块源文件
        """
        arch = self.target_arch(target)
        stale_arch = "x64" if arch == "x86" else "x86"

        stale = out_dir / MERGE_MODULE_TEMPLATE.format(arch=stale_arch)
        if stale.exists():
            debug(f"删除旧的合并模块: {stale.name}", stage=LogStage.BUNDLE)
        stale.unlink(missing_ok=True)

        filename = MERGE_MODULE_TEMPLATE.format(arch=arch)
        source_dir = source_dir or default_merge_modules_dir()
        if source_dir is None:
            raise FileNotFoundError(
                "找不到合并模块目录，请设置 bundle.windows.mergeModulesDir 或 VCToolsRedistDir 环境变量"
            )
        source = source_dir / filename
        if not source.is_file():
            raise FileNotFoundError(f"合并模块不存在: {source}")

        destination = out_dir / filename
        destination.write_bytes(source.read_bytes())
        info(f"已放置合并模块: {filename}", stage=LogStage.BUNDLE)
        return destination


def default_merge_modules_dir() -> Optional[Path]:
    """Visual Studio 开发者环境中的合并模块目录"""
    redist = os.environ.get("VCToolsRedistDir")
    if not redist:
        return None
    return Path(redist) / "MergeModules"


def current_platform() -> PlatformPolicy:
    """按当前运行平台选择策略"""
    if os.name == 'nt':
        return WindowsPolicy()
    if sys.platform == 'darwin':
        return MacPolicy()
    return LinuxPolicy()
