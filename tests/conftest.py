from pathlib import Path

import pytest

from deadmono.core.errors import CommandError
from deadmono.core.models import (
    AnalysisOptions,
    DeadPackageRecord,
    EntrypointInfo,
    FunctionRecord,
    ModuleInfo,
    PackageReport,
    Position,
)

MODULE = "example.com/mono"
CACHE = f"{MODULE}/pkg/cache"
LOGGING = f"{MODULE}/pkg/logging"
HTTP = f"{MODULE}/pkg/http"


def func(name: str, file: str, line: int, col: int = 6, generated: bool = False) -> FunctionRecord:
    return FunctionRecord(
        name=name, position=Position(file=file, line=line, col=col), generated=generated
    )


def report(path: str, *funcs: FunctionRecord) -> PackageReport:
    return PackageReport(name=path.rsplit("/", 1)[-1], path=path, funcs=list(funcs))


def record(path: str, *funcs: FunctionRecord) -> DeadPackageRecord:
    return DeadPackageRecord(
        name=path.rsplit("/", 1)[-1], path=path, functions={f.name: f for f in funcs}
    )


def entrypoint(name: str, deps: set[str], *records: DeadPackageRecord) -> EntrypointInfo:
    return EntrypointInfo(
        abs_path=f"/repo/services/{name}/main.go",
        module=ModuleInfo(name=f"{MODULE}/", root="/repo"),
        deps=deps,
        dead_code={r.path: r for r in records},
    )


class FakeModuleTool:
    """In-memory module tool keyed by entrypoint directory."""

    def __init__(
        self,
        modules: dict[str, ModuleInfo],
        deps: dict[str, set[str]],
    ) -> None:
        self.modules = modules
        self.deps = deps
        self.calls: list[tuple[str, str]] = []

    async def module_info(self, directory: str) -> ModuleInfo:
        self.calls.append(("module_info", directory))
        if directory not in self.modules:
            raise CommandError(["go", "list", "-m"], "go: go.mod file not found", 1)
        return self.modules[directory]

    async def dependencies(self, directory: str) -> set[str]:
        self.calls.append(("dependencies", directory))
        if directory not in self.deps:
            raise CommandError(["go", "list"], "go: cannot find main module", 1)
        return set(self.deps[directory])


class FakeAnalyzer:
    """In-memory deadcode analyzer keyed by entrypoint directory."""

    def __init__(self, reports: dict[str, list[PackageReport]]) -> None:
        self.reports = reports
        self.calls: list[tuple[str, AnalysisOptions]] = []

    async def dead_code(self, directory: str, options: AnalysisOptions) -> list[PackageReport]:
        self.calls.append((directory, options))
        if directory not in self.reports:
            raise CommandError(["deadcode", "-json", "./..."], "deadcode: packages contain errors", 1)
        return [r.model_copy(deep=True) for r in self.reports[directory]]


class Monorepo:
    """Three services sharing cache and logging packages.

    a and b import cache and logging, c imports only logging. Nobody has
    dead logging functions, cache has Set/Delete dead in a and Get/Delete
    dead in b.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        for name in ("a", "b", "c"):
            (root / "services" / name).mkdir(parents=True)
            (root / "services" / name / "main.go").write_text("package main\n")

        module = ModuleInfo(name=f"{MODULE}/", root=str(root))
        self.module_tool = FakeModuleTool(
            modules={self.dir(name): module for name in ("a", "b", "c")},
            deps={
                self.dir("a"): {CACHE, LOGGING},
                self.dir("b"): {CACHE, LOGGING},
                self.dir("c"): {LOGGING},
            },
        )
        self.analyzer = FakeAnalyzer(
            reports={
                self.dir("a"): [
                    report(
                        CACHE,
                        func("Set", "../../pkg/cache/cache.go", 9),
                        func("Delete", "../../pkg/cache/cache.go", 12),
                    )
                ],
                self.dir("b"): [
                    report(
                        CACHE,
                        func("Get", "../../pkg/cache/cache.go", 6),
                        func("Delete", "../../pkg/cache/cache.go", 12),
                    )
                ],
                self.dir("c"): [],
            }
        )

    def dir(self, name: str) -> str:
        return str(self.root / "services" / name)

    def main(self, name: str) -> str:
        return str(self.root / "services" / name / "main.go")


@pytest.fixture
def monorepo(tmp_path: Path) -> Monorepo:
    return Monorepo(tmp_path)
