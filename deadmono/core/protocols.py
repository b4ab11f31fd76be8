"""Protocols for the external tools used by the analysis."""

from typing import Any, Protocol

from deadmono.core.models import AnalysisOptions, ModuleInfo, PackageReport


class ProgressCallback(Protocol):
    """Protocol defining a progress callback function."""

    def update(self, message: str, **fields: Any) -> None:
        """Update progress with a message."""
        ...


class ModuleTool(Protocol):
    """Protocol defining the module/dependency listing interface."""

    async def module_info(self, directory: str) -> ModuleInfo:
        """Get identity and root directory of the module owning ``directory``."""
        ...

    async def dependencies(self, directory: str) -> set[str]:
        """Get import paths of all packages transitively imported from ``directory``."""
        ...


class DeadcodeAnalyzer(Protocol):
    """Protocol defining the dead code analyzer interface."""

    async def dead_code(self, directory: str, options: AnalysisOptions) -> list[PackageReport]:
        """List packages with functions unreachable from the main package in ``directory``."""
        ...
