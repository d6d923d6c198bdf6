"""
Build 命令实现

执行一次发布构建。
"""

import traceback
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ...build import Build, BuildError, PreBuildHookError
from ...utils.logging import OutputLevel, set_log_file, set_log_level


console = Console()


def split_bundles(values: Optional[List[str]]) -> Optional[List[str]]:
    """支持 ``-b deb -b msi`` 和 ``-b deb,msi`` 两种写法"""
    if not values:
        return None
    names: List[str] = []
    for value in values:
        names.extend(part.strip() for part in value.split(',') if part.strip())
    return names


def build_command(
    debug: bool = typer.Option(False, "--debug", "-d", help="使用 debug 配置编译"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志并让打包引擎输出详细信息"),
    runner: Optional[str] = typer.Option(None, "--runner", "-r", help="原生构建工具，覆盖配置中的 build.runner"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="交叉编译目标三元组"),
    bundles: Optional[List[str]] = typer.Option(None, "--bundles", "-b", help="打包格式 (deb, rpm, appimage, msi, app, dmg, updater, none)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="配置文件路径，缺省自动查找"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
) -> None:
    """构建应用

    编译原生应用，按配置重命名、打包并签名 updater 产物。

    示例:
        deskforge build
        deskforge build --debug --target x86_64-pc-windows-msvc
        deskforge build -b deb,updater -c src-native/deskforge.conf.yaml
    """
    set_log_level(OutputLevel.DEBUG if verbose else OutputLevel.INFO)

    if log_file:
        try:
            set_log_file(log_file)
        except OSError:
            console.print(f"[yellow]无法写入日志文件: {log_file}[/yellow]")

    build = Build()
    if debug:
        build.debug()
    if verbose:
        build.verbose()
    if runner:
        build.runner(runner)
    if target:
        build.target(target)
    names = split_bundles(bundles)
    if names is not None:
        build.bundles(names)
    if config:
        build.config(Path(config))

    try:
        context = build.run()
    except PreBuildHookError as e:
        console.print(f"[red]✗ 构建失败[/red]: {escape(str(e))}")
        if e.output:
            console.print("[yellow]命令输出:[/yellow]")
            console.print(e.output, markup=False, highlight=False)
        raise typer.Exit(1)
    except BuildError as e:
        console.print(f"[red]✗ 构建失败[/red]: {escape(str(e))}")
        if log_file:
            console.print("[yellow]详细错误信息:[/yellow]")
            console.print(traceback.format_exc(), markup=False, highlight=False)
        raise typer.Exit(1)

    console.print("[green]✓ 构建完成[/green]")
    for bundle in context.bundles:
        for path in bundle.bundle_paths:
            console.print(f"  [blue]{bundle.package_type.short_name}[/blue]: {path}")
