"""
Package based intersection of dead code across entrypoints.

Every entrypoint has one of three opinions about a package:

* ``NotImported`` - the entrypoint never imports it and has no say,
* ``FullyUsed`` - it imports the package and reaches every function in it,
* ``PartiallyDead`` - it imports the package and reports dead functions.

Merging opinions is commutative and associative: ``NotImported`` is the
identity, ``FullyUsed`` absorbs everything, and two ``PartiallyDead`` values
keep the functions dead in both. Entrypoint order therefore never changes the
result.
"""

from collections.abc import Iterable, Mapping
from functools import reduce
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from deadmono.core.models import DeadPackageRecord, EntrypointInfo


class NotImported(BaseModel):
    model_config = ConfigDict(frozen=True)


class FullyUsed(BaseModel):
    model_config = ConfigDict(frozen=True)


class PartiallyDead(BaseModel):
    model_config = ConfigDict(frozen=True)

    record: DeadPackageRecord


PackageState = NotImported | FullyUsed | PartiallyDead

NOT_IMPORTED = NotImported()
FULLY_USED = FullyUsed()

IntersectionState = dict[str, FullyUsed | PartiallyDead]


def package_state(entrypoint: EntrypointInfo, package: str) -> PackageState:
    """Opinion of a single entrypoint about a package."""
    record = entrypoint.dead_code.get(package)
    if record is not None and record.functions:
        return PartiallyDead(record=record)
    if record is not None or package in entrypoint.deps:
        return FULLY_USED
    return NOT_IMPORTED


def merge_states(current: PackageState, other: PackageState) -> PackageState:
    """Combine two opinions about the same package."""
    if isinstance(current, NotImported):
        return other
    if isinstance(other, NotImported):
        return current
    if isinstance(current, FullyUsed) or isinstance(other, FullyUsed):
        return FULLY_USED

    assert isinstance(current, PartiallyDead) and isinstance(other, PartiallyDead)
    kept = current.record.functions
    other_functions = other.record.functions
    functions = {name: func for name, func in kept.items() if name in other_functions}
    if not functions:
        return FULLY_USED
    return PartiallyDead(record=current.record.model_copy(update={"functions": functions}))


def entrypoint_states(entrypoint: EntrypointInfo) -> IntersectionState:
    """Opinions of an entrypoint about every package it knows of."""
    packages = set(entrypoint.deps) | set(entrypoint.dead_code)
    states: IntersectionState = {}
    for package in packages:
        state = package_state(entrypoint, package)
        assert not isinstance(state, NotImported)
        states[package] = state
    return states


def merge(state: IntersectionState, entrypoint: EntrypointInfo) -> IntersectionState:
    """Fold one more entrypoint into the accumulated state.

    The input state is not modified.
    """
    result = dict(state)
    for package, other in entrypoint_states(entrypoint).items():
        merged = merge_states(result.get(package, NOT_IMPORTED), other)
        assert not isinstance(merged, NotImported)
        result[package] = merged
    return result


def to_records(state: IntersectionState) -> Mapping[str, DeadPackageRecord]:
    """Turn the final state into package records, fully used ones are empty."""
    records: dict[str, DeadPackageRecord] = {}
    for package, package_verdict in state.items():
        if isinstance(package_verdict, PartiallyDead):
            records[package] = package_verdict.record
        else:
            records[package] = DeadPackageRecord(name=package.rsplit("/", 1)[-1], path=package)
    return MappingProxyType(records)


def intersect_dead_code(entrypoints: Iterable[EntrypointInfo]) -> Mapping[str, DeadPackageRecord]:
    """
    Intersect dead code of all entrypoints package by package.

    A function survives only if it is dead in every entrypoint importing its
    package. Packages no entrypoint imports are absent from the result.

    Raises:
        ValueError: no entrypoints were given
    """
    entrypoints = list(entrypoints)
    if not entrypoints:
        raise ValueError("at least one entrypoint is required")
    state = reduce(merge, entrypoints[1:], entrypoint_states(entrypoints[0]))
    return to_records(state)
