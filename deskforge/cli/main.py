"""
deskforge 命令行入口
"""

import platform as _platform
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from .commands import build, validate


app = typer.Typer(
    name="deskforge",
    help="桌面应用发布构建：编译、重命名、打包并签名 updater 产物",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def _print_version(value: bool) -> None:
    if value:
        console.print(f"deskforge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V",
        callback=_print_version,
        is_eager=True,
        help="显示版本并退出",
    ),
) -> None:
    """deskforge 命令行"""


app.command("build", help="编译并打包应用")(build.build_command)
app.command("validate", help="检查配置文件")(validate.validate_command)


@app.command("info")
def info_command() -> None:
    """列出运行环境和各打包格式的支持情况"""
    from ..build.bundler import DISABLE_BUNDLING, DefaultBundler, PackageType
    from ..build.platform import current_platform

    policy = current_platform()
    console.print(
        f"deskforge {__version__} · Python {_platform.python_version()} · 平台 {policy.name}"
    )

    defaults = set(policy.default_package_types())
    builtin = set(DefaultBundler().supported_types())

    table = Table(title="打包格式", title_justify="left")
    table.add_column("短名", style="cyan")
    table.add_column("平台默认", justify="center")
    table.add_column("内置后端", justify="center")
    for package_type in PackageType:
        table.add_row(
            package_type.short_name,
            "✓" if package_type in defaults else "",
            "✓" if package_type in builtin else "",
        )
    table.add_row(DISABLE_BUNDLING, "", "", end_section=True)
    console.print(table)
    console.print("[dim]其他格式需要向 DefaultBundler 注册后端[/dim]")


if __name__ == "__main__":
    app()
