"""
应用设置解析

从配置和原生清单推导包元数据、编译输出目录、二进制文件列表和打包设置。
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..config.schema import AppConfig
from .build_context import AppSettingsError
from .bundler import BundleBinary, BundleSettings, PackageSettings
from .manifest import Manifest
from .platform import PlatformPolicy

TARGET_DIR_ENV = "CARGO_TARGET_DIR"


@dataclass
class AppSettings:
    """一次构建的应用设置"""
    manifest: Manifest
    project_dir: Path
    product_name: Optional[str] = None

    @classmethod
    def load(cls, config: AppConfig, manifest: Manifest, project_dir: Path) -> 'AppSettings':
        """校验清单中的必填字段

        Raises:
            AppSettingsError: 缺少 package.name 或 package.version
        """
        missing = [key for key in ('name', 'version') if not getattr(manifest, key)]
        if missing:
            raise AppSettingsError(
                f"{manifest.path.name} 缺少必填字段: {', '.join('package.' + key for key in missing)}"
            )
        return cls(manifest=manifest, project_dir=project_dir, product_name=config.package.product_name)

    @property
    def package_name(self) -> str:
        """清单中的包名，也是编译出的二进制文件名"""
        return self.manifest.name or ""

    @property
    def main_binary_name(self) -> str:
        """重命名之后的主二进制文件名（不含平台后缀）"""
        return self.product_name or self.package_name

    def get_out_dir(self, debug: bool, target: Optional[str] = None) -> Path:
        """编译输出目录: <target_dir>[/<triple>]/<debug|release>"""
        target_dir = os.environ.get(TARGET_DIR_ENV)
        base = Path(target_dir) if target_dir else self.project_dir / "target"
        if not base.is_absolute():
            base = self.project_dir / base
        if target:
            base = base / target
        return base / ("debug" if debug else "release")

    def get_package_settings(self) -> PackageSettings:
        return PackageSettings(
            product_name=self.main_binary_name,
            version=self.manifest.version or "",
            description=self.manifest.description or "",
            homepage=self.manifest.homepage,
            authors=list(self.manifest.authors),
        )

    def get_bundle_settings(self, config: AppConfig) -> BundleSettings:
        bundle = config.bundle
        return BundleSettings(
            identifier=bundle.identifier,
            icon=list(bundle.icon),
            resources=list(bundle.resources),
            copyright=bundle.copyright,
            category=bundle.category,
            short_description=bundle.short_description or self.manifest.description,
            long_description=bundle.long_description,
            external_bin=list(bundle.external_bin),
        )

    def get_binaries(self, config: AppConfig, platform: PlatformPolicy) -> List[BundleBinary]:
        """主二进制文件在前，其后是清单中的 [[bin]] 和外部二进制"""
        main_name = self.main_binary_name
        binaries = [BundleBinary(name=platform.binary_name(main_name), main=True)]
        for name in self.manifest.bins:
            if name in (main_name, self.package_name):
                continue
            binaries.append(BundleBinary(name=platform.binary_name(name)))
        for path in config.bundle.external_bin:
            binaries.append(BundleBinary(name=platform.binary_name(Path(path).name)))
        return binaries
