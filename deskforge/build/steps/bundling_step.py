"""
打包步骤模块

先解析并校验打包格式，再放置合并模块、组装设置并调用打包引擎。
"""

from typing import List, Optional

from ...utils import resolve_against
from ...utils.logging import LogStage, debug, info, success
from ..build_context import BuildContext, BuildError, BundleError
from ..bundler import PackageType, Settings, resolve_package_types
from .build_step import BuildStep


class BundlingStep(BuildStep):
    """bundle.active 为真时打包"""

    def __init__(self):
        super().__init__("bundle", "打包应用")

    def get_progress_range(self) -> tuple[int, int]:
        return (80, 95)

    def execute(self, context: BuildContext) -> None:
        config = context.require_config().snapshot()
        if not config.bundle.active:
            debug("bundle.active 未启用，跳过打包", stage=LogStage.BUNDLE)
            return

        # 任何副作用之前先校验格式
        package_types = self.resolve_types(context)
        if package_types is not None and not package_types:
            info("打包已被 none 禁用", stage=LogStage.BUNDLE)
            return
        if package_types is None:
            package_types = context.services.platform.default_package_types()
            if config.bundle.updater.active:
                package_types.append(PackageType.UPDATER)

        platform = context.services.platform
        merge_modules_dir = config.bundle.windows.merge_modules_dir
        context.report_progress("打包", self.get_progress_range()[0], "准备打包设置")

        try:
            platform.stage_merge_modules(
                context.out_dir,
                resolve_against(merge_modules_dir, context.project_dir) if merge_modules_dir else None,
                context.target,
            )
            settings = Settings(
                package=context.app_settings.get_package_settings(),
                bundle=context.app_settings.get_bundle_settings(config),
                binaries=context.app_settings.get_binaries(config, platform),
                project_out_directory=context.out_dir,
                package_types=package_types,
                verbose=context.options.verbose,
                archive_format=platform.archive_format,
                target=context.target,
            )
            context.bundles = context.services.bundler.bundle_project(settings)
        except BuildError:
            raise
        except Exception as e:
            raise BundleError(f"打包失败: {e}") from e

        total = sum(len(bundle.bundle_paths) for bundle in context.bundles)
        success(f"打包完成，共 {total} 个产物", stage=LogStage.BUNDLE)

    def resolve_types(self, context: BuildContext) -> Optional[List[PackageType]]:
        """命令行指定的格式优先，其次是配置中的 bundle.targets 列表"""
        names = context.options.bundles
        if not names:
            with context.require_config().read() as config:
                targets = config.bundle.targets
            names = list(targets) if isinstance(targets, list) else None
        return resolve_package_types(names)
