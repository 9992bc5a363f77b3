"""Dependency graph stores for sbom-compliance."""

from sbom_compliance.graph.memory import (
    GraphSnapshot,
    InMemoryDependencyGraph,
    ProductNode,
)

__all__ = ["GraphSnapshot", "InMemoryDependencyGraph", "ProductNode"]
