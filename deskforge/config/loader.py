"""
配置加载器

负责查找、解析和验证构建配置，并以加锁的只读快照形式提供给构建管道。
"""

import json
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .schema import AppConfig

# 按优先级排列的默认配置文件名
CONFIG_FILENAMES = (
    "deskforge.conf.yaml",
    "deskforge.conf.yml",
    "deskforge.conf.json",
)

# 支持的配置文件后缀
_SUFFIXES = (".yaml", ".yml", ".json")

# 查找配置时跳过的目录
_SKIPPED_DIRS = {"node_modules", "target", "dist", "__pycache__"}


class ConfigError(Exception):
    """配置无法读取或解析"""
    pass


class ConfigValidationError(ConfigError):
    """配置内容不符合 schema，errors 为 pydantic 的错误列表"""

    def __init__(self, message: str, errors: List[Dict[str, Any]]):
        super().__init__(message)
        self.errors = errors

    def format_errors(self) -> str:
        """每个错误一行，如 ``build.distDir: Field required``"""
        lines = []
        for item in self.errors:
            where = ".".join(str(part) for part in item.get('loc', ())) or "(根)"
            lines.append(f"{where}: {item.get('msg', '')}")
        return "\n".join(lines)

    def format_errors_json(self) -> str:
        return json.dumps(self.errors, ensure_ascii=False, indent=2, default=str)

    def __str__(self) -> str:
        return "\n".join([self.args[0], self.format_errors()])


class ConfigHandle:
    """共享配置快照

    配置本身不可变；锁只在读取期间持有，调用方应在启动外部进程前退出
    ``read()`` 上下文。
    """

    def __init__(self, config: AppConfig, path: Optional[Path] = None):
        self._config = config
        self._lock = threading.RLock()
        self.path = path

    @contextmanager
    def read(self) -> Iterator[AppConfig]:
        """在锁内读取配置"""
        with self._lock:
            yield self._config

    def snapshot(self) -> AppConfig:
        """返回当前配置对象（模型本身不可变，可在锁外使用）"""
        with self._lock:
            return self._config

    @property
    def project_dir(self) -> Optional[Path]:
        """配置文件所在目录，即项目根目录"""
        return self.path.parent if self.path else None


class ConfigLoader:
    """配置加载器"""

    def __init__(self):
        self.yaml = YAML(typ='safe')

    def find_config(self, start: Optional[Union[str, Path]] = None) -> Path:
        """从 start 目录开始向下查找配置文件

        先检查 start 本身，再按目录名排序逐层向下查找，跳过隐藏目录和
        构建产物目录。

        Raises:
            ConfigError: 找不到配置文件
        """
        start_dir = Path(start) if start else Path.cwd()

        for root, dirs, files in os.walk(start_dir):
            dirs[:] = sorted(d for d in dirs if not d.startswith('.') and d not in _SKIPPED_DIRS)
            for filename in CONFIG_FILENAMES:
                if filename in files:
                    return Path(root) / filename

        raise ConfigError(
            f"在 {start_dir} 及其子目录中找不到配置文件 ({', '.join(CONFIG_FILENAMES)})"
        )

    def load_from_file(self, config_path: Union[str, Path]) -> AppConfig:
        """读取并校验一个配置文件

        Raises:
            ConfigError: 文件不存在、类型不支持或解析失败
            ConfigValidationError: 内容不符合 schema
        """
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"找不到配置文件: {path}")

        suffix = path.suffix.lower()
        if suffix not in _SUFFIXES:
            raise ConfigError(f"不支持的配置文件类型 {suffix or '(无后缀)'}，应为 {', '.join(_SUFFIXES)}")

        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"无法读取 {path}: {e}") from e

        try:
            data = json.loads(text) if suffix == '.json' else self.yaml.load(text)
        except (YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"{path.name} 解析失败: {e}") from e

        if data is None:
            raise ConfigError(f"{path.name} 是空文件")
        if not isinstance(data, dict):
            raise ConfigError(f"{path.name} 的顶层必须是映射，实际为 {type(data).__name__}")

        return self.load_from_dict(data)

    def load_from_dict(self, data: Dict[str, Any]) -> AppConfig:
        """按 schema 校验字典

        Raises:
            ConfigValidationError: 校验失败
        """
        try:
            return AppConfig.from_dict(data)
        except ValidationError as e:
            raise ConfigValidationError("配置校验失败", e.errors()) from e

    def load(self, config_path: Optional[Union[str, Path]] = None,
             start: Optional[Union[str, Path]] = None) -> ConfigHandle:
        """加载配置并包装为共享快照

        Args:
            config_path: 显式指定的配置文件；为 None 时自动查找
            start: 自动查找的起始目录
        """
        path = Path(config_path) if config_path else self.find_config(start)
        config = self.load_from_file(path)
        return ConfigHandle(config, path.resolve())

    def validate_file(self, config_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """检查配置文件，返回 pydantic 风格的错误列表（空列表即通过）

        读取或解析失败也以一条 ``config_error`` 记录返回，不抛出异常。
        """
        try:
            self.load_from_file(config_path)
        except ConfigValidationError as e:
            return list(e.errors)
        except ConfigError as e:
            return [{'type': 'config_error', 'loc': (), 'msg': str(e)}]
        return []


config_loader = ConfigLoader()


def load_config(config_path: Optional[Union[str, Path]] = None,
                start: Optional[Union[str, Path]] = None) -> ConfigHandle:
    return config_loader.load(config_path, start)


def find_config(start: Optional[Union[str, Path]] = None) -> Path:
    return config_loader.find_config(start)


def validate_config(config_path: Union[str, Path]) -> List[Dict[str, Any]]:
    return config_loader.validate_file(config_path)
