"""
validate 命令

只做配置检查，不触碰项目文件。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...config import ConfigError, find_config, validate_config


console = Console()

_MAX_INPUT_WIDTH = 40


def _location(error: Dict[str, Any]) -> str:
    return ".".join(str(part) for part in error.get('loc', ())) or "(根)"


def _input_preview(error: Dict[str, Any]) -> str:
    if 'input' not in error:
        return ""
    text = repr(error['input'])
    if len(text) > _MAX_INPUT_WIDTH:
        text = text[:_MAX_INPUT_WIDTH - 1] + "…"
    return text


def _render_errors(config_path: Path, errors: List[Dict[str, Any]]) -> None:
    table = Table(title=f"{config_path.name}: {len(errors)} 个问题", title_justify="left")
    table.add_column("字段", style="cyan", no_wrap=True)
    table.add_column("问题", style="red")
    table.add_column("实际值", style="yellow")
    for error in errors:
        table.add_row(_location(error), error.get('msg', ''), _input_preview(error))
    console.print(table)


def validate_command(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="配置文件路径，缺省自动查找"),
    json_output: bool = typer.Option(False, "--json", help="以 JSON 输出检查结果"),
) -> None:
    """检查配置文件

    示例:
        deskforge validate
        deskforge validate -c src-native/deskforge.conf.yaml --json
    """
    try:
        config_path = Path(config) if config else find_config()
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    errors = validate_config(config_path)

    if json_output:
        report = {"file": str(config_path), "valid": not errors, "errors": errors}
        console.print_json(json.dumps(report, ensure_ascii=False, default=str))
    elif errors:
        _render_errors(config_path, errors)
    else:
        console.print(f"[green]✓[/green] {escape(str(config_path))} 验证通过")

    if errors:
        raise typer.Exit(1)
