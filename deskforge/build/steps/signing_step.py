"""
updater 签名步骤模块
"""

from pathlib import Path
from typing import List

from ...utils.logging import LogStage, debug, info, print
from ..build_context import BuildContext, BuildError, SigningError
from ..bundler import PackageType
from .build_step import BuildStep


class UpdaterSigningStep(BuildStep):
    """updater 启用且配置了公钥时，对 updater 产物逐个签名"""

    def __init__(self):
        super().__init__("sign", "签名 updater 产物")

    def get_progress_range(self) -> tuple[int, int]:
        return (95, 100)

    def execute(self, context: BuildContext) -> None:
        with context.require_config().read() as config:
            enabled = config.updater_signing_enabled()
            pubkey = config.bundle.updater.pubkey

        if not enabled:
            debug("updater 未启用或未配置公钥，跳过签名", stage=LogStage.SIGN)
            return

        signed_paths: List[Path] = []
        for bundle in context.bundles:
            if bundle.package_type is not PackageType.UPDATER:
                continue
            for path in bundle.bundle_paths:
                # 第一个失败即终止，不再签名剩余产物
                try:
                    signed = context.services.signer(path, pubkey)
                except BuildError:
                    raise
                except Exception as e:
                    raise SigningError(f"签名 {path} 失败: {e}") from e
                context.signed_artifacts.append(signed)
                signed_paths.append(signed.signature_path)

        if signed_paths:
            print_signed_updater_archive(signed_paths)


def print_signed_updater_archive(output_paths: List[Path]) -> None:
    """报告签名文件路径"""
    pluralised = "updater archive" if len(output_paths) == 1 else "updater archives"
    info(f"{len(output_paths)} {pluralised} at:", stage=LogStage.SIGN)
    for path in output_paths:
        print(f"        {path}")
