"""Entrypoint resolution and the module compatibility policy."""

import logging
import os
from pathlib import Path

from deadmono.core.errors import (
    CommandError,
    ModuleMismatchError,
    ResolutionError,
)
from deadmono.core.models import EntrypointInfo, ModuleInfo
from deadmono.core.protocols import ModuleTool

logger = logging.getLogger(__name__)


class EntrypointResolver:
    """
    Resolve entrypoints and check they can be intersected.

    The first resolved entrypoint sets the common module. Later entrypoints
    from another module are only accepted with a custom package filter, in
    which case the run no longer has a common module and reported paths stay
    absolute.
    """

    def __init__(self, module_tool: ModuleTool, custom_filter: bool = False) -> None:
        self.module_tool = module_tool
        self.custom_filter = custom_filter
        self.common_module: str = ""
        self.has_common_module = False

    async def resolve(self, path: str | Path) -> EntrypointInfo:
        """
        Resolve an entrypoint source file to its absolute path and module.

        Raises:
            ResolutionError: the path does not belong to a Go module
            ModuleMismatchError: the module differs from the common module
        """
        abs_path = os.path.abspath(path)
        logger.debug(f"Start scanning entrypoint: {abs_path}")

        directory = os.path.dirname(abs_path)
        if not os.path.isdir(directory):
            raise ResolutionError(f"entrypoint directory does not exist: {directory}")

        try:
            module = await self.module_tool.module_info(directory)
        except CommandError as e:
            raise ResolutionError(f"failed to list module name: {e}") from e

        self.check_module(module)
        return EntrypointInfo(abs_path=abs_path, module=module)

    def check_module(self, module: ModuleInfo) -> None:
        """Apply the module compatibility policy to a newly resolved module."""
        if not self.common_module:
            self.common_module = module.name
            self.has_common_module = True
        elif self.common_module == module.name:
            pass
        elif not self.custom_filter:
            # Without a custom filter deadcode reports only the entrypoint's own
            # module, so intersecting different modules is meaningless.
            raise ModuleMismatchError(self.common_module, module.name)
        else:
            self.has_common_module = False
        logger.debug(f"Detected module name: {self.common_module}")
