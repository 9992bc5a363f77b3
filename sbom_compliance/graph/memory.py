"""In-memory dependency graph backed by a JSON snapshot.

Serves as the graph store for the CLI and as the fake the resolver is
tested against.
"""
import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from sbom_compliance.constants import VERSION_SOURCE_LOCKFILE
from sbom_compliance.exceptions import ConfigurationError
from sbom_compliance.models.dependency import Dependency, Repository, VersionUpdate
from sbom_compliance.resolvers.base import DependencyGraph


class ProductNode(BaseModel):
    """A product with its linked repository and dependencies."""

    repository: Optional[Repository] = Field(default=None, description="Linked repository")
    dependencies: list[Dependency] = Field(
        default_factory=list,
        description="Dependencies the product depends on",
    )

    model_config = {"extra": "forbid"}


class GraphSnapshot(BaseModel):
    """Serializable state of an in-memory graph."""

    products: dict[str, ProductNode] = Field(
        default_factory=dict,
        description="Products keyed by product id",
    )

    model_config = {"extra": "forbid"}


class InMemoryDependencyGraph(DependencyGraph):
    """Dependency graph held in memory.

    Updates are applied by building the new dependency lists first and
    swapping them in under a lock, so a concurrent reader sees either none
    or all of a bulk update.
    """

    def __init__(self, snapshot: Optional[GraphSnapshot] = None) -> None:
        """Initialize the graph.

        Args:
            snapshot: Initial state. Defaults to an empty graph.
        """
        self._snapshot = snapshot.model_copy(deep=True) if snapshot else GraphSnapshot()
        self._lock = asyncio.Lock()

    @classmethod
    def from_file(cls, path: Path) -> "InMemoryDependencyGraph":
        """Load a graph from a JSON snapshot file.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read graph file '{path}': {e}") from e
        try:
            return cls(GraphSnapshot.model_validate_json(content))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid graph file '{path}': {e}") from e

    def to_file(self, path: Path) -> None:
        """Write the current state to a JSON snapshot file."""
        path.write_text(self._snapshot.model_dump_json(indent=2), encoding="utf-8")

    @property
    def snapshot(self) -> GraphSnapshot:
        """A copy of the current state."""
        return self._snapshot.model_copy(deep=True)

    def add_product(
        self,
        product_id: str,
        repository: Optional[Repository] = None,
        dependencies: Sequence[Dependency] = (),
    ) -> None:
        """Add or replace a product (used when seeding the graph)."""
        self._snapshot.products[product_id] = ProductNode(
            repository=repository,
            dependencies=[dep.model_copy() for dep in dependencies],
        )

    def get_dependencies(self, product_id: str) -> list[Dependency]:
        """Return copies of all dependencies of a product."""
        product = self._snapshot.products.get(product_id)
        if product is None:
            return []
        return [dep.model_copy() for dep in product.dependencies]

    async def get_repository(self, product_id: str) -> Optional[Repository]:
        product = self._snapshot.products.get(product_id)
        if product is None or product.repository is None:
            return None
        return product.repository.model_copy()

    async def find_versionless_dependencies(self, product_id: str) -> list[Dependency]:
        product = self._snapshot.products.get(product_id)
        if product is None:
            return []
        return [dep.model_copy() for dep in product.dependencies if dep.needs_version]

    async def apply_version_updates(self, updates: Sequence[VersionUpdate]) -> int:
        by_purl = {update.purl: update for update in updates}
        if not by_purl:
            return 0

        async with self._lock:
            updated = 0
            new_lists: dict[str, list[Dependency]] = {}
            for product_id, product in self._snapshot.products.items():
                new_deps: list[Dependency] = []
                for dep in product.dependencies:
                    update = by_purl.get(dep.purl)
                    if update is None:
                        new_deps.append(dep)
                        continue
                    new_deps.append(
                        dep.model_copy(
                            update={
                                "version": update.version,
                                "purl": update.new_purl,
                                "version_source": VERSION_SOURCE_LOCKFILE,
                                "hash_gap_reason": None,
                            }
                        )
                    )
                    updated += 1
                new_lists[product_id] = new_deps

            for product_id, deps in new_lists.items():
                self._snapshot.products[product_id].dependencies = deps
            return updated
