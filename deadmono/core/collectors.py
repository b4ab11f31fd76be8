"""Collectors for per-entrypoint dependencies and dead code."""

import logging
import time

from deadmono.core.errors import CommandError, DeadcodeListError, DependencyListError
from deadmono.core.models import (
    AnalysisOptions,
    DeadPackageRecord,
    EntrypointInfo,
    FunctionRecord,
    PackageReport,
)
from deadmono.core.protocols import DeadcodeAnalyzer, ModuleTool
from deadmono.core.utils import normalize_file_path

logger = logging.getLogger(__name__)


class DependencyCollector:
    """Collect import paths of packages reachable from an entrypoint."""

    def __init__(self, module_tool: ModuleTool) -> None:
        self.module_tool = module_tool

    async def collect(self, entrypoint: EntrypointInfo) -> set[str]:
        try:
            deps = await self.module_tool.dependencies(entrypoint.directory)
        except CommandError as e:
            raise DependencyListError(f"failed to list dependencies: {e}") from e
        logger.debug(f"Detected {len(deps)} dependencies")
        return deps


class DeadcodeCollector:
    """Run the analyzer for an entrypoint and normalize what it reports."""

    def __init__(self, analyzer: DeadcodeAnalyzer, options: AnalysisOptions) -> None:
        self.analyzer = analyzer
        self.options = options

    async def collect(
        self,
        entrypoint: EntrypointInfo,
        common_module: bool,
    ) -> dict[str, DeadPackageRecord]:
        """
        List dead functions of an entrypoint, keyed by package import path.

        Args:
            entrypoint: Resolved entrypoint
            common_module: Whether every entrypoint of the run shares one
                module; file paths are then made relative to the module root,
                otherwise they are absolute

        Returns:
            Mapping of package import path to its dead functions
        """
        directory = entrypoint.directory
        logger.debug(f"Detected root path: {entrypoint.module.root}")
        logger.debug(f"Starting to scan {directory} for deadcode, might take a while")
        start_time = time.time()

        try:
            packages = await self.analyzer.dead_code(directory, self.options)
        except CommandError as e:
            raise DeadcodeListError(f"failed to list deadcode: {e}") from e

        logger.debug(
            f"Scanning {directory} for deadcode finished in {time.time() - start_time:.2f}s"
        )

        module_root = entrypoint.module.root if common_module else None
        return {
            package.path: self._to_record(package, directory, module_root)
            for package in packages
        }

    @staticmethod
    def _to_record(
        package: PackageReport, directory: str, module_root: str | None
    ) -> DeadPackageRecord:
        functions: dict[str, FunctionRecord] = {}
        for func in package.funcs:
            file = normalize_file_path(func.position.file, directory, module_root)
            position = func.position.model_copy(update={"file": file})
            functions[func.name] = func.model_copy(update={"position": position})
        return DeadPackageRecord(name=package.name, path=package.path, functions=functions)
