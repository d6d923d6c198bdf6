"""
平台策略单元测试
"""

import pytest

from deskforge.build.bundler import PackageType
from deskforge.build.platform import (
    LinuxPolicy,
    MacPolicy,
    WindowsPolicy,
    default_merge_modules_dir,
)


class TestUnixPolicies:
    """Linux / macOS 策略"""

    def test_binary_name(self):
        assert LinuxPolicy().binary_name("demo") == "demo"
        assert MacPolicy().binary_name("demo") == "demo"

    def test_shell_command(self):
        assert LinuxPolicy().shell_command("npm run build") == ["sh", "-c", "npm run build"]

    def test_default_package_types(self):
        assert LinuxPolicy().default_package_types() == [PackageType.DEB, PackageType.APPIMAGE]
        assert MacPolicy().default_package_types() == [PackageType.MACOS_BUNDLE, PackageType.DMG]

    def test_merge_modules_noop(self, tmp_path):
        assert LinuxPolicy().stage_merge_modules(tmp_path, None) is None
        assert list(tmp_path.iterdir()) == []


class TestWindowsPolicy:
    """Windows 策略"""

    def test_binary_name(self):
        assert WindowsPolicy(host_machine="AMD64").binary_name("demo") == "demo.exe"

    def test_shell_command(self):
        assert WindowsPolicy(host_machine="AMD64").shell_command("npm run build") == ["cmd", "/C", "npm run build"]

    def test_archive_format(self):
        assert WindowsPolicy(host_machine="AMD64").archive_format == "zip"

    @pytest.mark.parametrize("host, target, expected", [
        ("AMD64", None, "x64"),
        ("x86", None, "x86"),
        ("AMD64", "i686-pc-windows-msvc", "x86"),
        ("x86", "x86_64-pc-windows-msvc", "x64"),
    ])
    def test_target_arch(self, host, target, expected):
        assert WindowsPolicy(host_machine=host).target_arch(target) == expected

    def test_stage_merge_modules(self, tmp_path):
        """写入匹配架构的模块，并删除另一架构的旧模块"""
        source = tmp_path / "MergeModules"
        source.mkdir()
        (source / "Microsoft_VC142_CRT_x64.msm").write_bytes(b"x64-module")
        out_dir = tmp_path / "release"
        out_dir.mkdir()
        stale = out_dir / "Microsoft_VC142_CRT_x86.msm"
        stale.write_bytes(b"old")

        staged = WindowsPolicy(host_machine="AMD64").stage_merge_modules(out_dir, source)

        assert staged == out_dir / "Microsoft_VC142_CRT_x64.msm"
        assert staged.read_bytes() == b"x64-module"
        assert not stale.exists()

    def test_stage_merge_modules_for_target(self, tmp_path):
        source = tmp_path / "MergeModules"
        source.mkdir()
        (source / "Microsoft_VC142_CRT_x86.msm").write_bytes(b"x86-module")

        staged = WindowsPolicy(host_machine="AMD64").stage_merge_modules(
            tmp_path, source, "i686-pc-windows-msvc"
        )

        assert staged.name == "Microsoft_VC142_CRT_x86.msm"

    def test_missing_module(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WindowsPolicy(host_machine="AMD64").stage_merge_modules(tmp_path, tmp_path / "missing")

    def test_default_source_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VCToolsRedistDir", str(tmp_path))
        source = tmp_path / "MergeModules"
        source.mkdir()
        (source / "Microsoft_VC142_CRT_x64.msm").write_bytes(b"module")
        out_dir = tmp_path / "release"
        out_dir.mkdir()

        assert default_merge_modules_dir() == source
        assert WindowsPolicy(host_machine="AMD64").stage_merge_modules(out_dir, None).is_file()

    def test_no_source_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("VCToolsRedistDir", raising=False)

        with pytest.raises(FileNotFoundError, match="VCToolsRedistDir"):
            WindowsPolicy(host_machine="AMD64").stage_merge_modules(tmp_path, None)
