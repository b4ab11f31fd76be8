"""Main monorepo dead code runner."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Sequence
from pathlib import Path
from typing import TypeVar

from deadmono.core.collectors import DeadcodeCollector, DependencyCollector
from deadmono.core.errors import UsageError
from deadmono.core.intersection import intersect_dead_code
from deadmono.core.models import AnalysisOptions, EntrypointInfo, ScanResult
from deadmono.core.protocols import DeadcodeAnalyzer, ModuleTool, ProgressCallback
from deadmono.core.resolver import EntrypointResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DeadmonoRunner:
    """Find functions unreachable from every entrypoint of a monorepo."""

    def __init__(
        self,
        module_tool: ModuleTool,
        analyzer: DeadcodeAnalyzer,
        options: AnalysisOptions | None = None,
        jobs: int = 1,
        verbose: bool = False,
    ) -> None:
        self.module_tool = module_tool
        self.analyzer = analyzer
        self.options = options or AnalysisOptions()
        self.jobs = max(jobs, 1)
        self.verbose = verbose

        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    async def scan(
        self,
        paths: Sequence[str | Path],
        progress_callback: ProgressCallback | None = None,
    ) -> ScanResult:
        """
        Scan entrypoints and intersect their dead code.

        Args:
            paths: Paths to the main files of all entrypoints
            progress_callback: Receives a message after every finished step

        Returns:
            ScanResult with functions dead in every importing entrypoint

        Raises:
            UsageError: no paths were given
            DeadmonoError: any entrypoint failed, nothing is reported then
        """
        if not paths:
            raise UsageError("no paths provided")

        start_time = time.time()
        resolver = EntrypointResolver(self.module_tool, self.options.has_custom_filter)
        dependencies = DependencyCollector(self.module_tool)
        deadcode = DeadcodeCollector(self.analyzer, self.options)

        # Every entrypoint must be resolved before scanning for dead code,
        # the path convention depends on all of their modules.
        entrypoints: list[EntrypointInfo] = []
        for path in paths:
            entrypoint = await resolver.resolve(path)
            entrypoint.deps = await dependencies.collect(entrypoint)
            entrypoints.append(entrypoint)
            _report(progress_callback, f"Resolved {entrypoint.abs_path}")

        semaphore = asyncio.Semaphore(self.jobs)

        async def collect(entrypoint: EntrypointInfo) -> None:
            async with semaphore:
                entrypoint.dead_code = await deadcode.collect(
                    entrypoint, resolver.has_common_module
                )
            _report(progress_callback, f"Scanned {entrypoint.abs_path}")

        await _gather_or_cancel([collect(entrypoint) for entrypoint in entrypoints])

        dead_code = intersect_dead_code(entrypoints)
        scan_duration = time.time() - start_time

        result = ScanResult(
            dead_code=dead_code,
            entrypoints=len(entrypoints),
            has_common_module=resolver.has_common_module,
            scan_duration=scan_duration,
        )
        logger.debug(
            f"Found {len(result.unused_functions)} unused functions across "
            f"{len(entrypoints)} entrypoints"
        )
        return result


async def _gather_or_cancel(aws: Sequence[Awaitable[T]]) -> list[T]:
    """Await all, cancelling the rest as soon as one fails."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _report(progress_callback: ProgressCallback | None, message: str) -> None:
    if progress_callback is not None:
        progress_callback.update(message, advance=1)
