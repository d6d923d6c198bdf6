"""
原生编译步骤模块
"""

from ...utils.logging import LogStage, info, success
from ..build_context import BuildContext, BuildError, CompileError
from ..compiler import DEFAULT_RUNNER
from .build_step import BuildStep


class CompilationStep(BuildStep):
    """确定 runner 与目标后执行原生编译"""

    def __init__(self):
        super().__init__("compile", "编译原生应用")

    def get_progress_range(self) -> tuple[int, int]:
        return (30, 70)

    def execute(self, context: BuildContext) -> None:
        options = context.options
        with context.require_config().read() as config:
            runner_from_config = config.build.runner
            target_from_config = config.build.target
            features = list(config.build.features)

        # 优先级: 命令行 > 配置 > 默认
        context.runner = options.runner or runner_from_config or DEFAULT_RUNNER
        context.target = options.target or target_from_config

        profile = "debug" if options.debug else "release"
        info(
            f"编译 - runner: {context.runner}, 配置: {profile}, 目标: {context.target or '本机'}",
            stage=LogStage.COMPILE,
        )
        context.report_progress("编译", self.get_progress_range()[0], f"{context.runner} build")

        try:
            context.services.compiler.build_project(context.runner, context.target, options.debug, features)
        except BuildError:
            raise
        except Exception as e:
            raise CompileError(f"编译应用失败: {e}") from e

        context.report_progress("编译", self.get_progress_range()[1], "编译完成")
        success("编译完成", stage=LogStage.COMPILE)
