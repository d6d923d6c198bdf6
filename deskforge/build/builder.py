"""
构建器主类

以链式调用配置一次发布构建，然后交给构建管道执行。
"""

from pathlib import Path
from typing import List, Optional, Union

from .build_context import BuildContext, BuildError, BuildOptions, ProgressCallback
from .build_pipeline import BuildPipeline
from .services import BuildServices


class Build:
    """发布构建

    示例::

        Build().runner("cross").target("aarch64-unknown-linux-gnu").bundles(["deb"]).run()

    每个实例只能执行一次 ``run``。
    """

    def __init__(self, services: Optional[BuildServices] = None):
        self._services = services
        self._runner: Optional[str] = None
        self._debug = False
        self._verbose = False
        self._target: Optional[str] = None
        self._bundles: Optional[List[str]] = None
        self._config: Optional[Path] = None
        self._consumed = False

    def debug(self) -> 'Build':
        """使用 debug 配置编译"""
        self._debug = True
        return self

    def verbose(self) -> 'Build':
        """让打包引擎输出详细信息"""
        self._verbose = True
        return self

    def runner(self, runner: str) -> 'Build':
        self._runner = runner
        return self

    def target(self, target: str) -> 'Build':
        self._target = target
        return self

    def bundles(self, bundles: List[str]) -> 'Build':
        """只打包这些格式；包含 none 时不打包"""
        self._bundles = list(bundles)
        return self

    def config(self, config: Union[str, Path]) -> 'Build':
        """使用指定的配置文件而不是自动查找"""
        self._config = Path(config)
        return self

    def options(self) -> BuildOptions:
        return BuildOptions(
            runner=self._runner,
            debug=self._debug,
            verbose=self._verbose,
            target=self._target,
            bundles=self._bundles,
            config_path=self._config,
        )

    def run(self, progress_callback: Optional[ProgressCallback] = None) -> BuildContext:
        """执行构建

        Returns:
            BuildContext: 构建上下文（产物、签名结果等）

        Raises:
            BuildError: 构建失败，子类标明失败阶段
        """
        if self._consumed:
            raise BuildError("该 Build 已经执行过，请创建新的实例")
        self._consumed = True

        pipeline = BuildPipeline(self._services)
        return pipeline.execute(self.options(), progress_callback)
