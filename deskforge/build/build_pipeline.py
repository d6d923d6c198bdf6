"""
构建管道

按固定顺序执行发布构建的各个步骤。任一步骤抛出异常即停止，
已经生成的产物不做回滚。
"""

import time
from typing import List, Optional

from ..utils.logging import LogStage, debug, error, info, success
from .build_context import BuildContext, BuildError, BuildOptions, ProgressCallback
from .services import BuildServices
from .steps.build_step import BuildStep
from .steps.config_loading_step import ConfigLoadingStep
from .steps.working_directory_step import WorkingDirectoryStep
from .steps.manifest_rewrite_step import ManifestRewriteStep
from .steps.before_build_step import BeforeBuildStep
from .steps.asset_check_step import AssetCheckStep
from .steps.compilation_step import CompilationStep
from .steps.app_settings_step import AppSettingsStep
from .steps.rename_step import ArtifactRenameStep
from .steps.bundling_step import BundlingStep
from .steps.signing_step import UpdaterSigningStep


def default_steps() -> List[BuildStep]:
    """发布构建的标准步骤序列"""
    return [
        ConfigLoadingStep(),
        WorkingDirectoryStep(),
        ManifestRewriteStep(),
        BeforeBuildStep(),
        AssetCheckStep(),
        CompilationStep(),
        AppSettingsStep(),
        ArtifactRenameStep(),
        BundlingStep(),
        UpdaterSigningStep(),
    ]


class BuildPipeline:
    """构建管道

    Args:
        services: 外部协作者，缺省使用真实的编译器、打包引擎和签名器
    """

    def __init__(self, services: Optional[BuildServices] = None):
        self.services = services or BuildServices()
        self._steps: List[BuildStep] = default_steps()

    def add_step(self, step: BuildStep, position: Optional[int] = None):
        if position is None:
            self._steps.append(step)
        else:
            self._steps.insert(position, step)

    def remove_step(self, step_name: str):
        """按名称移除步骤，名称不存在时不做任何事"""
        self._steps = [step for step in self._steps if step.name != step_name]

    def get_steps(self) -> List[BuildStep]:
        return list(self._steps)

    def execute(
        self,
        options: BuildOptions,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BuildContext:
        """执行全部步骤

        Returns:
            BuildContext: 构建结果（输出目录、打包产物、签名文件等）

        Raises:
            BuildError: 失败步骤对应的子类；非 BuildError 异常会被包装
        """
        context = BuildContext(
            options=options,
            services=self.services,
            progress_callback=progress_callback,
        )
        stats = context.build_stats
        stats['start_time'] = time.time()

        info("开始构建", stage=LogStage.BUILD)
        debug(f"构建选项: {options}", stage=LogStage.BUILD)

        for step in self._steps:
            debug(f"[{step.name}] {step.description}", stage=LogStage.BUILD)
            try:
                step.execute(context)
            except BuildError as e:
                self._fail(context, step, e)
                raise
            except Exception as e:
                self._fail(context, step, e)
                raise BuildError(f"{step.description}失败: {e}") from e
            stats['steps'].append(step.name)
            context.report_progress(step.description, step.get_progress_range()[1])

        stats['end_time'] = time.time()
        success(f"构建完成，用时 {stats['end_time'] - stats['start_time']:.1f}秒", stage=LogStage.DONE)
        return context

    @staticmethod
    def _fail(context: BuildContext, step: BuildStep, cause: Exception) -> None:
        context.build_stats['end_time'] = time.time()
        error(f"步骤 {step.name} 失败: {cause}", stage=LogStage.BUILD)

    def validate_pipeline(self) -> List[str]:
        """检查各步骤的进度区间首尾相接并覆盖 0-100

        Returns:
            问题描述列表，空列表表示没有问题
        """
        if not self._steps:
            return ["构建管道中没有步骤"]

        problems = []
        expected_start = 0
        for step in self._steps:
            start, end = step.get_progress_range()
            if start != expected_start:
                problems.append(f"{step.name}: 进度范围不连续，应从 {expected_start}% 开始，实际为 {start}%")
            if end <= start:
                problems.append(f"{step.name}: 进度范围无效 ({start}% - {end}%)")
            expected_start = end

        if expected_start != 100:
            problems.append(f"进度范围结束于 {expected_start}%，不是 100%")
        return problems
