"""
updater 产物签名

使用 Ed25519 私钥（从环境变量读取）对 updater 归档签名，签名以 base64
文本写到 ``<产物>.sig``。配置了公钥时会用它校验刚生成的签名。
"""

import base64
import binascii
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from ..utils.logging import LogStage, debug
from .build_context import SigningError

# 私钥：PEM 文本、base64 编码的 PEM，或 PEM 文件路径
ENV_PRIVATE_KEY = "DESKFORGE_PRIVATE_KEY"
# 私钥密码（可选）
ENV_KEY_PASSWORD = "DESKFORGE_KEY_PASSWORD"

SIGNATURE_SUFFIX = ".sig"


@dataclass
class SignedArtifact:
    """签名结果"""
    artifact_path: Path
    signature_path: Path
    signature: bytes


def _pem_bytes(value: str) -> bytes:
    """把配置或环境变量中的密钥文本还原为 PEM 字节"""
    value = value.strip()
    if value.startswith("-----BEGIN"):
        return value.encode("ascii")

    try:
        candidate = Path(value)
        if candidate.is_file():
            return candidate.read_bytes()
    except OSError:
        # 过长的 base64 文本会被当作非法路径
        pass

    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SigningError("密钥既不是 PEM，也不是有效的 base64 文本或文件路径") from e
    if not decoded.lstrip().startswith(b"-----BEGIN"):
        raise SigningError("base64 解码后的密钥不是 PEM 格式")
    return decoded


def load_private_key(value: str, password: Optional[str] = None) -> Ed25519PrivateKey:
    """加载 Ed25519 私钥

    Raises:
        SigningError: 密钥格式错误、密码错误或不是 Ed25519 密钥
    """
    pem = _pem_bytes(value)
    try:
        key = serialization.load_pem_private_key(
            pem, password=password.encode("utf-8") if password else None
        )
    except (ValueError, TypeError) as e:
        raise SigningError(f"无法加载私钥: {e}") from e
    if not isinstance(key, Ed25519PrivateKey):
        raise SigningError("私钥必须是 Ed25519 密钥")
    return key


def load_public_key(value: str) -> Ed25519PublicKey:
    """加载 Ed25519 公钥"""
    pem = _pem_bytes(value)
    try:
        key = serialization.load_pem_public_key(pem)
    except ValueError as e:
        raise SigningError(f"无法加载公钥: {e}") from e
    if not isinstance(key, Ed25519PublicKey):
        raise SigningError("公钥必须是 Ed25519 密钥")
    return key


def sign_file(path: Union[str, Path], private_key: Ed25519PrivateKey,
              public_key: Optional[Ed25519PublicKey] = None) -> SignedArtifact:
    """对文件签名并写出 .sig 文件

    Raises:
        SigningError: 文件无法读取、签名写出失败或公钥校验不通过
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise SigningError(f"无法读取待签名文件 {path}: {e}") from e

    signature = private_key.sign(data)

    if public_key is not None:
        try:
            public_key.verify(signature, data)
        except InvalidSignature as e:
            raise SigningError(f"签名与配置的公钥不匹配: {path}") from e

    signature_path = path.with_name(path.name + SIGNATURE_SUFFIX)
    try:
        signature_path.write_text(base64.b64encode(signature).decode("ascii"), encoding="ascii")
    except OSError as e:
        raise SigningError(f"无法写入签名文件 {signature_path}: {e}") from e

    debug(f"已签名: {path.name} -> {signature_path.name}", stage=LogStage.SIGN)
    return SignedArtifact(artifact_path=path, signature_path=signature_path, signature=signature)


def sign_file_from_env_variables(path: Union[str, Path], pubkey: Optional[str] = None) -> SignedArtifact:
    """使用环境变量中的私钥签名

    Args:
        path: 待签名的产物
        pubkey: 配置中的公钥，提供时用于校验签名

    Raises:
        SigningError: 未设置私钥环境变量或签名失败
    """
    private_key_value = os.environ.get(ENV_PRIVATE_KEY)
    if not private_key_value:
        raise SigningError(f"未设置环境变量 {ENV_PRIVATE_KEY}，无法签名 updater 产物")

    private_key = load_private_key(private_key_value, os.environ.get(ENV_KEY_PASSWORD))
    public_key = load_public_key(pubkey) if pubkey else None
    return sign_file(path, private_key, public_key)
