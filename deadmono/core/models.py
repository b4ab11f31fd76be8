"""Data models for monorepo dead code analysis."""

import os
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FILTER = "<module>"


class Position(BaseModel):
    """Position of a function declaration, line and column are 1-based."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file: str = Field(alias="File")
    line: int = Field(alias="Line")
    col: int = Field(alias="Col")


class FunctionRecord(BaseModel):
    """A function reported as unreachable."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(alias="Name")
    position: Position = Field(alias="Position")
    generated: bool = Field(default=False, alias="Generated")
    marker: bool = Field(default=False, alias="Marker")

    def sort_key(self) -> tuple[str, int, int, str]:
        return (self.position.file, self.position.line, self.position.col, self.name)


class PackageReport(BaseModel):
    """One package of `deadcode -json` output, also used for JSON results."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    path: str = Field(alias="Path")
    funcs: list[FunctionRecord] = Field(default_factory=list, alias="Funcs")


class DeadPackageRecord(BaseModel):
    """Dead functions of one package, keyed by function name.

    An empty ``functions`` mapping means the package is imported and every
    function in it is used.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    functions: dict[str, FunctionRecord] = Field(default_factory=dict)

    def to_report(self) -> PackageReport:
        funcs = sorted(self.functions.values(), key=FunctionRecord.sort_key)
        return PackageReport(name=self.name, path=self.path, funcs=funcs)


class ModuleInfo(BaseModel):
    """Identity and root directory of a Go module."""

    model_config = ConfigDict(frozen=True)

    name: str
    root: str


class EntrypointInfo(BaseModel):
    """Everything collected about a single entrypoint."""

    abs_path: str
    module: ModuleInfo
    deps: set[str] = Field(default_factory=set)
    dead_code: dict[str, DeadPackageRecord] = Field(default_factory=dict)

    @property
    def directory(self) -> str:
        """Directory holding the entrypoint, where external tools are run."""
        return os.path.dirname(self.abs_path)


class AnalysisOptions(BaseModel):
    """Options passed through to the deadcode analyzer."""

    include_tests: bool = False
    include_generated: bool = False
    build_tags: str = ""
    filter_pattern: str = DEFAULT_FILTER

    @property
    def has_custom_filter(self) -> bool:
        return self.filter_pattern not in ("", DEFAULT_FILTER)


class ScanResult(BaseModel):
    """Results of intersecting dead code across all entrypoints."""

    model_config = ConfigDict(frozen=True)

    dead_code: Mapping[str, DeadPackageRecord]
    entrypoints: int
    has_common_module: bool
    scan_duration: float

    @field_validator("dead_code", mode="after")
    @classmethod
    def _read_only(
        cls, value: Mapping[str, DeadPackageRecord]
    ) -> Mapping[str, DeadPackageRecord]:
        return MappingProxyType(dict(value))

    @property
    def unused_functions(self) -> list[FunctionRecord]:
        return [
            func
            for record in self.dead_code.values()
            for func in record.functions.values()
        ]
