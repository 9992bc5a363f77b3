"""Tests for the in-memory dependency graph."""
import asyncio
from pathlib import Path

import pytest

from sbom_compliance.constants import VERSION_SOURCE_LOCKFILE
from sbom_compliance.exceptions import ConfigurationError
from sbom_compliance.graph.memory import GraphSnapshot, InMemoryDependencyGraph
from sbom_compliance.models.dependency import Dependency, Repository, VersionUpdate


def _dep(name: str, version: str | None = None) -> Dependency:
    purl = f"pkg:npm/{name}@{version}" if version else f"pkg:npm/{name}"
    return Dependency(
        name=name,
        purl=purl,
        ecosystem="npm",
        version=version,
        hash_gap_reason=None if version else "missing version",
    )


@pytest.fixture
def graph() -> InMemoryDependencyGraph:
    """Graph with one product holding a mix of versioned dependencies."""
    graph = InMemoryDependencyGraph()
    graph.add_product(
        "shop",
        repository=Repository(url="https://github.com/acme/shop"),
        dependencies=[_dep("express"), _dep("lodash", "4.17.21"), _dep("debug", "")],
    )
    return graph


class TestQueries:
    """Tests for graph reads."""

    @pytest.mark.asyncio
    async def test_get_repository(self, graph: InMemoryDependencyGraph) -> None:
        """Test reading the linked repository."""
        repository = await graph.get_repository("shop")
        assert repository is not None
        assert repository.url == "https://github.com/acme/shop"
        assert await graph.get_repository("unknown") is None

    @pytest.mark.asyncio
    async def test_find_versionless(self, graph: InMemoryDependencyGraph) -> None:
        """Test that null and empty versions are both returned."""
        deps = await graph.find_versionless_dependencies("shop")
        assert sorted(d.name for d in deps) == ["debug", "express"]
        assert await graph.find_versionless_dependencies("unknown") == []

    @pytest.mark.asyncio
    async def test_reads_return_copies(self, graph: InMemoryDependencyGraph) -> None:
        """Test that callers cannot mutate stored nodes."""
        deps = await graph.find_versionless_dependencies("shop")
        deps[0].version = "9.9.9"
        assert len(await graph.find_versionless_dependencies("shop")) == 2


class TestApplyVersionUpdates:
    """Tests for apply_version_updates."""

    @pytest.mark.asyncio
    async def test_updates_matching_nodes(self, graph: InMemoryDependencyGraph) -> None:
        """Test that an update sets version, purl and source."""
        count = await graph.apply_version_updates(
            [
                VersionUpdate(
                    purl="pkg:npm/express",
                    version="4.18.2",
                    new_purl="pkg:npm/express@4.18.2",
                )
            ]
        )

        assert count == 1
        express = next(d for d in graph.get_dependencies("shop") if d.name == "express")
        assert express.version == "4.18.2"
        assert express.purl == "pkg:npm/express@4.18.2"
        assert express.version_source == VERSION_SOURCE_LOCKFILE
        assert express.hash_gap_reason is None

    @pytest.mark.asyncio
    async def test_never_deletes_nodes(self, graph: InMemoryDependencyGraph) -> None:
        """Test that unmatched nodes are kept unchanged."""
        await graph.apply_version_updates(
            [VersionUpdate(purl="pkg:npm/missing", version="1.0.0", new_purl="pkg:npm/missing@1.0.0")]
        )
        assert len(graph.get_dependencies("shop")) == 3

    @pytest.mark.asyncio
    async def test_empty_updates(self, graph: InMemoryDependencyGraph) -> None:
        """Test that no updates is a no-op."""
        assert await graph.apply_version_updates([]) == 0

    @pytest.mark.asyncio
    async def test_updates_shared_node_in_every_product(self) -> None:
        """Test that a purl shared by two products is updated in both."""
        graph = InMemoryDependencyGraph()
        graph.add_product("a", dependencies=[_dep("express")])
        graph.add_product("b", dependencies=[_dep("express")])

        count = await graph.apply_version_updates(
            [VersionUpdate(purl="pkg:npm/express", version="4.18.2", new_purl="pkg:npm/express@4.18.2")]
        )

        assert count == 2
        assert graph.get_dependencies("b")[0].version == "4.18.2"

    @pytest.mark.asyncio
    async def test_concurrent_reader_sees_whole_batch(
        self, graph: InMemoryDependencyGraph
    ) -> None:
        """Test that a concurrent read sees none or all of a batch."""
        updates = [
            VersionUpdate(purl="pkg:npm/express", version="4.18.2", new_purl="pkg:npm/express@4.18.2"),
            VersionUpdate(purl="pkg:npm/debug", version="4.3.4", new_purl="pkg:npm/debug@4.3.4"),
        ]

        _, remaining = await asyncio.gather(
            graph.apply_version_updates(updates),
            graph.find_versionless_dependencies("shop"),
        )

        assert len(remaining) in (0, 2)


class TestSnapshotFiles:
    """Tests for JSON snapshot persistence."""

    def test_roundtrip(self, graph: InMemoryDependencyGraph, tmp_path: Path) -> None:
        """Test writing and reloading a snapshot."""
        path = tmp_path / "graph.json"
        graph.to_file(path)

        loaded = InMemoryDependencyGraph.from_file(path)
        assert loaded.snapshot == graph.snapshot

    def test_snapshot_is_a_copy(self, graph: InMemoryDependencyGraph) -> None:
        """Test that the snapshot property does not expose internal state."""
        snapshot = graph.snapshot
        snapshot.products.clear()
        assert "shop" in graph.snapshot.products

    def test_initial_snapshot_is_copied(self) -> None:
        """Test that the graph does not share the snapshot it was built from."""
        snapshot = GraphSnapshot()
        graph = InMemoryDependencyGraph(snapshot)
        graph.add_product("shop")
        assert snapshot.products == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test loading a file that does not exist."""
        with pytest.raises(ConfigurationError, match="Cannot read graph file"):
            InMemoryDependencyGraph.from_file(tmp_path / "missing.json")

    def test_invalid_file(self, tmp_path: Path) -> None:
        """Test loading a file with an invalid structure."""
        path = tmp_path / "graph.json"
        path.write_text('{"products": {"shop": {"unexpected": 1}}}', encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid graph file"):
            InMemoryDependencyGraph.from_file(path)
