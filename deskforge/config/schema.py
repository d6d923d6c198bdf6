"""
配置 Schema 定义

使用 Pydantic 定义桌面应用构建配置模型。配置文件中的键使用 camelCase
（如 ``distDir``），Python 侧使用 snake_case 字段名，两者都可用于构造。
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _ConfigBase(BaseModel):
    """所有配置段的公共设置：camelCase 别名、禁止额外字段、不可变"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )


class BuildModel(_ConfigBase):
    """构建配置"""
    dist_dir: str = Field(..., description="前端构建产物目录（相对于项目根目录）", min_length=1)
    runner: Optional[str] = Field(None, description="原生构建工具，缺省为 cargo")
    before_build_command: Optional[str] = Field(None, description="编译前执行的 shell 命令")
    target: Optional[str] = Field(None, description="交叉编译目标三元组")
    features: List[str] = Field(default_factory=list, description="传给编译器的特性列表")
    app_dir: Optional[str] = Field(None, description="前置命令的工作目录（相对于项目根目录）")

    @field_validator('runner', 'target')
    @classmethod
    def validate_not_blank(cls, v: Optional[str]) -> Optional[str]:
        """空字符串视为未设置"""
        if v is not None and not v:
            return None
        return v


class PackageModel(_ConfigBase):
    """包信息"""
    product_name: Optional[str] = Field(None, description="产品名称，用于重命名二进制文件", max_length=100)
    version: Optional[str] = Field(None, description="版本号，写回原生清单")

    @field_validator('product_name')
    @classmethod
    def validate_product_name(cls, v: Optional[str]) -> Optional[str]:
        """产品名会成为文件名，不允许路径分隔符"""
        if v is None or not v:
            return None
        if any(sep in v for sep in ('/', '\\')):
            raise ValueError("产品名称不能包含路径分隔符")
        return v

    @field_validator('version')
    @classmethod
    def validate_version(cls, v: Optional[str]) -> Optional[str]:
        """验证版本号格式（SemVer，可带预发布后缀）"""
        import re
        if v is None:
            return None
        if not re.match(r'^\d+\.\d+\.\d+(?:-[\w\-\.]+)?(?:\+[\w\-\.]+)?$', v):
            raise ValueError("版本号格式不正确，应为 SemVer，例如 1.0.0 或 1.2.3-beta.1")
        return v


class UpdaterModel(_ConfigBase):
    """自动更新配置"""
    active: bool = Field(False, description="是否生成并签名 updater 包")
    pubkey: Optional[str] = Field(None, description="用于校验更新签名的公钥（PEM 或其 base64）")
    endpoints: List[str] = Field(default_factory=list, description="更新检查地址")

    @field_validator('pubkey')
    @classmethod
    def validate_pubkey(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class WindowsModel(_ConfigBase):
    """Windows 打包配置"""
    merge_modules_dir: Optional[str] = Field(
        None,
        description="VC 运行库合并模块 (.msm) 所在目录，缺省使用 %VCToolsRedistDir%/MergeModules",
    )


class BundleModel(_ConfigBase):
    """打包配置"""
    active: bool = Field(False, description="是否在编译后打包")
    targets: Union[Literal["all"], List[str]] = Field(
        "all",
        description="打包格式短名列表或 all；all 使用平台默认格式 (deb/appimage、app/dmg、msi)，"
                    "内置后端只有 updater，其他格式需要先向 DefaultBundler 注册",
    )
    identifier: Optional[str] = Field(None, description="应用标识，如 com.example.app")
    icon: List[str] = Field(default_factory=list, description="图标文件列表")
    resources: List[str] = Field(default_factory=list, description="附带资源")
    copyright: Optional[str] = Field(None, description="版权信息")
    category: Optional[str] = Field(None, description="应用分类")
    short_description: Optional[str] = Field(None, description="简短描述")
    long_description: Optional[str] = Field(None, description="详细描述")
    external_bin: List[str] = Field(default_factory=list, description="随包分发的外部可执行文件")
    windows: WindowsModel = Field(default_factory=WindowsModel, description="Windows 专用配置")
    updater: UpdaterModel = Field(default_factory=UpdaterModel, description="自动更新配置")


class AppConfig(_ConfigBase):
    """deskforge 主配置模型

    这是整个配置文件的根模型，只有 ``build.distDir`` 为必填项。
    """
    build: BuildModel = Field(..., description="构建配置")
    package: PackageModel = Field(default_factory=PackageModel, description="包信息")
    bundle: BundleModel = Field(default_factory=BundleModel, description="打包配置")

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式（camelCase 键）"""
        return self.model_dump(exclude_none=True, by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        """从字典创建配置实例"""
        return cls.model_validate(data)

    def updater_signing_enabled(self) -> bool:
        """updater 已启用且配置了公钥"""
        return self.bundle.updater.active and self.bundle.updater.pubkey is not None
