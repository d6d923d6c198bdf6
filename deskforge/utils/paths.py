"""
路径工具
"""

from pathlib import Path
from typing import Union


def resolve_against(path: Union[str, Path], base: Path) -> Path:
    """相对路径按 base 解析，绝对路径原样返回

    配置中的 distDir、appDir 等都相对于项目根目录书写。
    """
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return (base / candidate).resolve()


def ensure_directory(path: Union[str, Path]) -> Path:
    """创建目录（含父目录）并返回它"""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def format_size(size_bytes: int) -> str:
    """把字节数格式化为 B / KB / MB / GB"""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"
