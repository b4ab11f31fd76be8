"""
deadmono - Find functions unreachable from every entrypoint of a Go monorepo.
"""

__version__ = "0.1.0"

from deadmono.core.intersection import intersect_dead_code
from deadmono.core.runner import DeadmonoRunner

__all__ = ["DeadmonoRunner", "intersect_dead_code"]
