"""
原生清单 (Cargo.toml) 读取与改写

读取使用 tomllib；改写只做逐行替换，保留文件中的注释与格式。
"""

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.schema import AppConfig
from ..utils.logging import LogStage, info

MANIFEST_FILENAME = "Cargo.toml"

_VERSION_LINE = re.compile(r'^(\s*version\s*=\s*)(["\'])(.*?)\2(.*)$')


class ManifestError(Exception):
    """清单读取或改写错误"""
    pass


@dataclass
class Manifest:
    """清单中与构建相关的字段"""
    path: Path
    name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    homepage: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    bins: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)


def read_manifest(path: Path) -> Manifest:
    """解析清单文件

    Raises:
        ManifestError: 文件不存在或不是合法的 TOML
    """
    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"找不到清单文件: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"清单文件格式错误 ({path.name}): {e}") from e
    except UnicodeDecodeError as e:
        raise ManifestError(f"清单文件不是 UTF-8 编码 ({path.name}): {e}") from e

    package = data.get('package', {})
    if not isinstance(package, dict):
        raise ManifestError(f"{path.name} 中的 package 必须是表，实际为 {type(package).__name__}")
    bins = data.get('bin', [])
    if not isinstance(bins, list) or not all(isinstance(b, dict) for b in bins):
        raise ManifestError(f"{path.name} 中的 bin 必须是表数组 ([[bin]])")
    version = package.get('version')
    authors = package.get('authors')
    return Manifest(
        path=path,
        name=package.get('name'),
        # version.workspace = true 之类的写法无法直接得到版本号
        version=version if isinstance(version, str) else None,
        description=package.get('description'),
        homepage=package.get('homepage'),
        authors=list(authors) if isinstance(authors, list) else [],
        bins=[b['name'] for b in bins if 'name' in b],
        raw=data,
    )


def replace_package_version(text: str, version: str) -> Optional[str]:
    """替换 [package] 段中的 version 行

    Returns:
        替换后的文本；段内没有 version 行时返回 None
    """
    lines = text.splitlines(keepends=True)
    section = None
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith('['):
            section = stripped.split('#', 1)[0].strip()
            continue
        if section != '[package]':
            continue
        match = _VERSION_LINE.match(line.rstrip('\r\n'))
        if match:
            newline = line[len(line.rstrip('\r\n')):]
            lines[index] = f'{match.group(1)}"{version}"{match.group(4)}{newline}'
            return ''.join(lines)
    return None


def rewrite_manifest(config: AppConfig, project_dir: Path) -> Manifest:
    """按配置规整清单并返回解析结果

    目前同步的是 ``package.version``：配置了版本且与清单不同时写回清单。

    Raises:
        ManifestError: 清单缺失、格式错误或无法写回
    """
    path = project_dir / MANIFEST_FILENAME
    manifest = read_manifest(path)

    version = config.package.version
    if version and version != manifest.version:
        text = path.read_text(encoding='utf-8')
        updated = replace_package_version(text, version)
        if updated is None:
            raise ManifestError(f"{path.name} 的 [package] 段中没有可改写的 version 字段")
        try:
            path.write_text(updated, encoding='utf-8')
        except OSError as e:
            raise ManifestError(f"无法写回清单 {path}: {e}") from e
        info(f"清单版本已同步: {manifest.version} -> {version}", stage=LogStage.MANIFEST)
        manifest = read_manifest(path)

    return manifest
