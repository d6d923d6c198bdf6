"""
清单与应用设置单元测试
"""

from pathlib import Path

import pytest

from deskforge.build.app_settings import AppSettings
from deskforge.build.build_context import AppSettingsError
from deskforge.build.manifest import (
    Manifest,
    ManifestError,
    read_manifest,
    replace_package_version,
    rewrite_manifest,
)
from deskforge.build.platform import LinuxPolicy, WindowsPolicy
from deskforge.config.schema import AppConfig


CARGO_TOML = """\
[package]
name = "demo-app"
version = "0.1.0"  # keep in sync
description = "Demo application"
authors = ["Jane <jane@example.com>"]

[[bin]]
name = "demo-app"
path = "src/main.rs"

[[bin]]
name = "demo-helper"
path = "src/helper.rs"

[dependencies]
serde = { version = "1.0", features = ["derive"] }
"""


def make_config(**sections) -> AppConfig:
    data = {"build": {"distDir": "../dist"}}
    data.update(sections)
    return AppConfig.from_dict(data)


@pytest.fixture
def project(tmp_path):
    (tmp_path / "Cargo.toml").write_text(CARGO_TOML, encoding="utf-8")
    return tmp_path


class TestReadManifest:
    """清单读取测试"""

    def test_fields(self, project):
        manifest = read_manifest(project / "Cargo.toml")

        assert manifest.name == "demo-app"
        assert manifest.version == "0.1.0"
        assert manifest.description == "Demo application"
        assert manifest.authors == ["Jane <jane@example.com>"]
        assert manifest.bins == ["demo-app", "demo-helper"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match="找不到清单文件"):
            read_manifest(tmp_path / "Cargo.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "Cargo.toml"
        path.write_text("[package\nname = ", encoding="utf-8")

        with pytest.raises(ManifestError):
            read_manifest(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "Cargo.toml"
        path.write_bytes(b'[package]\nname = "\xff"\n')

        with pytest.raises(ManifestError, match="UTF-8"):
            read_manifest(path)

    @pytest.mark.parametrize("content", [
        'package = "oops"\n',
        'bin = "demo"\n',
        'bin = ["demo"]\n',
    ])
    def test_wrong_table_shape(self, tmp_path, content):
        """package 必须是表，bin 必须是表数组"""
        path = tmp_path / "Cargo.toml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ManifestError):
            read_manifest(path)

    def test_workspace_version(self, tmp_path):
        path = tmp_path / "Cargo.toml"
        path.write_text('[package]\nname = "demo"\nversion.workspace = true\n', encoding="utf-8")

        assert read_manifest(path).version is None


class TestReplacePackageVersion:
    """版本行替换测试"""

    def test_only_package_section(self):
        updated = replace_package_version(CARGO_TOML, "2.0.0")

        assert 'version = "2.0.0"  # keep in sync\n' in updated
        assert 'serde = { version = "1.0", features = ["derive"] }' in updated

    def test_no_version_line(self):
        assert replace_package_version('[package]\nname = "demo"\n', "1.0.0") is None

    def test_version_outside_package(self):
        text = '[package]\nname = "demo"\n\n[workspace.package]\nversion = "0.1.0"\n'
        assert replace_package_version(text, "1.0.0") is None

    def test_preserves_crlf(self):
        text = '[package]\r\nname = "demo"\r\nversion = "0.1.0"\r\n'
        assert replace_package_version(text, "1.0.0") == '[package]\r\nname = "demo"\r\nversion = "1.0.0"\r\n'


class TestRewriteManifest:
    """清单改写测试"""

    def test_syncs_version(self, project):
        manifest = rewrite_manifest(make_config(package={"version": "1.4.0"}), project)

        assert manifest.version == "1.4.0"
        assert read_manifest(project / "Cargo.toml").version == "1.4.0"

    def test_unchanged_without_version(self, project):
        before = (project / "Cargo.toml").read_text(encoding="utf-8")

        manifest = rewrite_manifest(make_config(), project)

        assert manifest.version == "0.1.0"
        assert (project / "Cargo.toml").read_text(encoding="utf-8") == before

    def test_no_rewritable_version(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "demo"\nversion.workspace = true\n',
                                             encoding="utf-8")

        with pytest.raises(ManifestError):
            rewrite_manifest(make_config(package={"version": "1.0.0"}), tmp_path)


class TestAppSettings:
    """AppSettings 测试"""

    def test_requires_name_and_version(self, tmp_path):
        manifest = Manifest(path=tmp_path / "Cargo.toml", name="demo")

        with pytest.raises(AppSettingsError, match="package.version"):
            AppSettings.load(make_config(), manifest, tmp_path)

    def test_names(self, project):
        manifest = read_manifest(project / "Cargo.toml")

        settings = AppSettings.load(make_config(package={"productName": "Demo App"}), manifest, project)

        assert settings.package_name == "demo-app"
        assert settings.main_binary_name == "Demo App"

    def test_out_dir(self, project, monkeypatch):
        monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)
        settings = AppSettings.load(make_config(), read_manifest(project / "Cargo.toml"), project)

        assert settings.get_out_dir(debug=False) == project / "target" / "release"
        assert settings.get_out_dir(debug=True) == project / "target" / "debug"
        assert settings.get_out_dir(False, "aarch64-apple-darwin") == \
            project / "target" / "aarch64-apple-darwin" / "release"

    def test_out_dir_from_environment(self, project, monkeypatch, tmp_path):
        monkeypatch.setenv("CARGO_TARGET_DIR", "build-output")
        settings = AppSettings.load(make_config(), read_manifest(project / "Cargo.toml"), project)

        assert settings.get_out_dir(debug=False) == project / "build-output" / "release"

        absolute = tmp_path / "shared-target"
        monkeypatch.setenv("CARGO_TARGET_DIR", str(absolute))
        assert settings.get_out_dir(debug=True) == absolute / "debug"

    def test_package_settings(self, project):
        config = make_config(package={"productName": "Demo App"})
        settings = AppSettings.load(config, read_manifest(project / "Cargo.toml"), project)

        package = settings.get_package_settings()

        assert package.product_name == "Demo App"
        assert package.version == "0.1.0"
        assert package.authors == ["Jane <jane@example.com>"]

    def test_bundle_settings(self, project):
        config = make_config(bundle={"identifier": "com.example.demo", "icon": ["icons/icon.png"]})
        settings = AppSettings.load(config, read_manifest(project / "Cargo.toml"), project)

        bundle = settings.get_bundle_settings(config)

        assert bundle.identifier == "com.example.demo"
        assert bundle.icon == ["icons/icon.png"]
        assert bundle.short_description == "Demo application"

    def test_binaries(self, project):
        config = make_config(package={"productName": "Demo App"}, bundle={"externalBin": ["bin/ffmpeg"]})
        settings = AppSettings.load(config, read_manifest(project / "Cargo.toml"), project)

        linux = [(b.name, b.main) for b in settings.get_binaries(config, LinuxPolicy())]
        windows = [b.name for b in settings.get_binaries(config, WindowsPolicy(host_machine="AMD64"))]

        assert linux == [("Demo App", True), ("demo-helper", False), ("ffmpeg", False)]
        assert windows == ["Demo App.exe", "demo-helper.exe", "ffmpeg.exe"]
