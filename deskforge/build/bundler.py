"""
打包适配器

定义打包格式枚举、打包设置，以及对外部打包引擎的调用接口。
具体的安装包格式由注册到 DefaultBundler 的后端实现，内置的只有
updater 归档后端。
"""

import tarfile
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..utils import ensure_directory, format_size
from ..utils.logging import LogStage, debug, info, success
from .build_context import BundleError, UnsupportedBundleFormatError

# 禁用全部打包的哨兵短名
DISABLE_BUNDLING = "none"


class PackageType(str, Enum):
    """打包格式"""
    DEB = "deb"
    RPM = "rpm"
    APPIMAGE = "appimage"
    MSI = "msi"
    MACOS_BUNDLE = "app"
    DMG = "dmg"
    IOS = "ios"
    UPDATER = "updater"

    @classmethod
    def from_short_name(cls, name: str) -> Optional['PackageType']:
        """短名到格式的查找表，无法识别时返回 None"""
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def short_name(self) -> str:
        return self.value

    @property
    def priority(self) -> int:
        """updater 依赖其他格式的产物，必须最后构建"""
        return 1 if self is PackageType.UPDATER else 0


_ALIASES = {"osx": PackageType.MACOS_BUNDLE.value}


def resolve_package_types(names: Optional[Iterable[str]]) -> Optional[List[PackageType]]:
    """把格式短名列表解析为 PackageType 列表

    先校验全部名称，任何无法识别的名称立即报错，不做部分打包。

    Returns:
        None 表示未限制格式（使用平台默认）；空列表表示已用 ``none`` 禁用打包

    Raises:
        UnsupportedBundleFormatError: 存在无法识别的短名
    """
    if names is None:
        return None
    names = [n.strip() for n in names if n.strip()]
    if not names:
        return None

    types: List[PackageType] = []
    disabled = False
    for name in names:
        if name == DISABLE_BUNDLING:
            disabled = True
            continue
        package_type = PackageType.from_short_name(name)
        if package_type is None:
            raise UnsupportedBundleFormatError(name)
        if package_type not in types:
            types.append(package_type)

    return [] if disabled else types


@dataclass
class PackageSettings:
    """包元数据"""
    product_name: str
    version: str
    description: str = ""
    homepage: Optional[str] = None
    authors: List[str] = field(default_factory=list)


@dataclass
class BundleSettings:
    """格式无关的打包设置"""
    identifier: Optional[str] = None
    icon: List[str] = field(default_factory=list)
    resources: List[str] = field(default_factory=list)
    copyright: Optional[str] = None
    category: Optional[str] = None
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    external_bin: List[str] = field(default_factory=list)


@dataclass
class BundleBinary:
    """需要打包的二进制文件"""
    name: str  # 含平台后缀的文件名
    main: bool = False


@dataclass
class Settings:
    """传给打包引擎的完整设置"""
    package: PackageSettings
    bundle: BundleSettings
    binaries: List[BundleBinary]
    project_out_directory: Path
    package_types: List[PackageType]
    verbose: bool = False
    archive_format: str = "gztar"  # gztar 或 zip
    target: Optional[str] = None

    def main_binary(self) -> BundleBinary:
        for binary in self.binaries:
            if binary.main:
                return binary
        raise BundleError("打包设置中没有主二进制文件")

    def binary_path(self, binary: BundleBinary) -> Path:
        return self.project_out_directory / binary.name

    def bundle_dir(self, package_type: PackageType) -> Path:
        return self.project_out_directory / "bundle" / package_type.short_name


@dataclass
class Bundle:
    """一种格式的打包结果"""
    package_type: PackageType
    bundle_paths: List[Path]


# 打包后端: 接收设置，返回产物路径
BundleBackend = Callable[[Settings], List[Path]]


class BundlerEngine(ABC):
    """打包引擎接口"""

    @abstractmethod
    def bundle_project(self, settings: Settings) -> List[Bundle]:
        """按 settings.package_types 打包，返回每种格式的产物"""
        pass


class DefaultBundler(BundlerEngine):
    """按格式分派到已注册后端的打包引擎"""

    def __init__(self, backends: Optional[Dict[PackageType, BundleBackend]] = None):
        self._backends: Dict[PackageType, BundleBackend] = {PackageType.UPDATER: bundle_updater}
        if backends:
            self._backends.update(backends)

    def register(self, package_type: PackageType, backend: BundleBackend) -> None:
        """注册（或替换）某种格式的后端"""
        self._backends[package_type] = backend

    def supported_types(self) -> List[PackageType]:
        return list(self._backends)

    def bundle_project(self, settings: Settings) -> List[Bundle]:
        # 先确认所有格式都有后端，避免打到一半才失败
        missing = [t.short_name for t in settings.package_types if t not in self._backends]
        if missing:
            raise BundleError(
                f"没有可用的打包后端: {', '.join(missing)}；"
                "请在 bundle.targets 中只列出已注册的格式，或先调用 register 注册后端"
            )

        bundles: List[Bundle] = []
        for package_type in sorted(settings.package_types, key=lambda t: t.priority):
            info(f"打包格式: {package_type.short_name}", stage=LogStage.BUNDLE)
            paths = self._backends[package_type](settings)
            for path in paths:
                debug(f"  产物: {path}", stage=LogStage.BUNDLE)
            bundles.append(Bundle(package_type=package_type, bundle_paths=paths))
        return bundles


def bundle_updater(settings: Settings) -> List[Path]:
    """把主二进制文件打成 updater 归档 (.tar.gz，Windows 为 .zip)"""
    binary = settings.main_binary()
    source = settings.binary_path(binary)
    if not source.is_file():
        raise BundleError(f"找不到主二进制文件: {source}")

    output_dir = ensure_directory(settings.bundle_dir(PackageType.UPDATER))
    stem = f"{settings.package.product_name}_{settings.package.version}"

    if settings.archive_format == "zip":
        archive = output_dir / f"{stem}.zip"
        with zipfile.ZipFile(archive, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
            zf.write(source, arcname=binary.name)
    elif settings.archive_format == "gztar":
        archive = output_dir / f"{stem}.tar.gz"
        with tarfile.open(archive, 'w:gz') as tf:
            tf.add(source, arcname=binary.name)
    else:
        raise BundleError(f"未知的归档格式: {settings.archive_format}")

    success(f"updater 归档完成: {archive.name} ({format_size(archive.stat().st_size)})", stage=LogStage.BUNDLE)
    return [archive]
