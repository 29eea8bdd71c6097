"""Tests for resource map resolution."""

from collections.abc import Callable
from pathlib import Path

from polygen.generation.project import ProjectModel
from polygen.generation.resource_map import (
    ResourceMap,
    ResourceMapBuilder,
    get_resource_map,
    to_location_uri,
)
from polygen.models.build import ProjectMapping


class TestToLocationUri:
    """Tests for to_location_uri."""

    def test_existing_directory_has_trailing_slash(self, temp_dir: Path) -> None:
        """Test URI of an existing directory."""
        uri = to_location_uri(temp_dir)

        assert uri.startswith("file://")
        assert uri.endswith("/")
        assert uri == temp_dir.absolute().as_uri() + "/"

    def test_missing_location_has_no_trailing_slash(self, temp_dir: Path) -> None:
        """Test URI of a location that does not exist."""
        uri = to_location_uri(temp_dir / "missing")

        assert uri == (temp_dir / "missing").absolute().as_uri()

    def test_path_is_normalized(self, temp_dir: Path) -> None:
        """Test that relative segments are collapsed."""
        (temp_dir / "a").mkdir()
        (temp_dir / "b").mkdir()

        assert to_location_uri(temp_dir / "a" / ".." / "b") == to_location_uri(temp_dir / "b")


class TestResourceMap:
    """Tests for ResourceMap."""

    def test_put_returns_previous_value(self) -> None:
        """Test last-write-wins semantics of put."""
        store = ResourceMap()

        assert store.put("core", "file:///a/") is None
        assert store.put("core", "file:///b/") == "file:///a/"
        assert store.get("core") == "file:///b/"
        assert len(store) == 1

    def test_snapshot_is_a_copy(self) -> None:
        """Test that snapshots do not track later writes."""
        store = ResourceMap()
        store.put("core", "file:///a/")

        snapshot = store.snapshot()
        store.put("ui", "file:///ui/")

        assert snapshot == {"core": "file:///a/"}
        assert "ui" in store

    def test_process_wide_map_is_shared(self) -> None:
        """Test that the default map is a single instance."""
        assert get_resource_map() is get_resource_map()


class TestResourceMapBuilder:
    """Tests for ResourceMapBuilder."""

    def test_register_uses_last_path_segment(self, resource_map: ResourceMap, temp_dir: Path) -> None:
        """Test the key and value of a single registration."""
        project_dir = temp_dir / "org.example.core"
        project_dir.mkdir()
        builder = ResourceMapBuilder(resource_map)

        previous = builder.register(project_dir)

        assert previous is None
        assert resource_map.get("org.example.core") == to_location_uri(project_dir)
        assert builder.registrations == [("org.example.core", to_location_uri(project_dir))]

    def test_auto_register_disabled_is_noop(
        self, resource_map: ResourceMap, make_project: Callable[..., ProjectModel]
    ) -> None:
        """Test that nothing is registered when auto-fill is off."""
        project = make_project("root/app", modules=["a"])
        builder = ResourceMapBuilder(resource_map, auto_fill=False)

        builder.auto_register(project)

        assert len(resource_map) == 0
        assert builder.registrations == []

    def test_auto_register_project_and_modules(
        self, resource_map: ResourceMap, make_project: Callable[..., ProjectModel]
    ) -> None:
        """Test registration order for a project without parent."""
        project = make_project("app", modules=["A", "B"])
        builder = ResourceMapBuilder(resource_map, auto_fill=True)

        builder.auto_register(project)

        assert [name for name, _ in builder.registrations] == ["app", "A", "B"]
        assert resource_map.get("A") == to_location_uri(project.basedir / "A")

    def test_auto_register_walks_parent_after_modules(
        self, resource_map: ResourceMap, make_project: Callable[..., ProjectModel], temp_dir: Path
    ) -> None:
        """Test that a parent's module overrides the child's module of the same name."""
        parent = make_project("parent", modules=["A"])
        project = make_project("project", modules=["A", "B"], parent=parent)
        builder = ResourceMapBuilder(resource_map, auto_fill=True)

        builder.auto_register(project)

        assert [name for name, _ in builder.registrations] == ["project", "A", "B", "parent", "A"]
        assert resource_map.get("A") == to_location_uri(temp_dir / "parent" / "A")
        assert resource_map.get("B") == to_location_uri(temp_dir / "project" / "B")

    def test_auto_register_three_level_chain_with_collisions(
        self, resource_map: ResourceMap, make_project: Callable[..., ProjectModel], temp_dir: Path
    ) -> None:
        """Test the final mapping for a project, its parent and grandparent."""
        grandparent = make_project("gp", modules=["shared", "common"])
        parent = make_project("p", modules=["shared", "child"], parent=grandparent)
        project = make_project("child", modules=["shared", "own"], parent=parent)
        builder = ResourceMapBuilder(resource_map, auto_fill=True)

        builder.auto_register(project)

        assert [name for name, _ in builder.registrations] == [
            "child", "shared", "own",
            "p", "shared", "child",
            "gp", "shared", "common",
        ]
        assert resource_map.snapshot() == {
            # "child" is overwritten by the parent's module dir p/child
            "child": to_location_uri(temp_dir / "p" / "child"),
            "shared": to_location_uri(temp_dir / "gp" / "shared"),
            "own": to_location_uri(temp_dir / "child" / "own"),
            "p": to_location_uri(temp_dir / "p"),
            "gp": to_location_uri(temp_dir / "gp"),
            "common": to_location_uri(temp_dir / "gp" / "common"),
        }

    def test_auto_register_is_idempotent(
        self, resource_map: ResourceMap, make_project: Callable[..., ProjectModel]
    ) -> None:
        """Test that walking twice yields the same map."""
        parent = make_project("parent", modules=["A"])
        project = make_project("project", modules=["A"], parent=parent)

        ResourceMapBuilder(resource_map, auto_fill=True).auto_register(project)
        first = resource_map.snapshot()
        ResourceMapBuilder(resource_map, auto_fill=True).auto_register(project)

        assert resource_map.snapshot() == first

    def test_ancestor_chain_stops_on_cycle(self, make_project: Callable[..., ProjectModel]) -> None:
        """Test that a parent cycle does not loop forever."""
        parent = make_project("parent")
        project = make_project("project", parent=parent)
        parent.parent = project

        chain = ResourceMapBuilder.ancestor_chain(project)

        assert [p.name for p in chain] == ["project", "parent"]

    def test_explicit_mappings_override_auto_discovery(
        self, resource_map: ResourceMap, make_project: Callable[..., ProjectModel], temp_dir: Path
    ) -> None:
        """Test that explicit mappings win over discovered entries."""
        project = make_project("app", modules=["core"])
        elsewhere = temp_dir / "elsewhere"
        elsewhere.mkdir()
        builder = ResourceMapBuilder(resource_map, auto_fill=True)

        builder.auto_register(project)
        builder.apply_overrides([ProjectMapping(project_name="core", path=elsewhere)])

        assert resource_map.get("core") == to_location_uri(elsewhere)

    def test_last_explicit_mapping_wins(self, resource_map: ResourceMap, temp_dir: Path) -> None:
        """Test ordering among explicit mappings."""
        builder = ResourceMapBuilder(resource_map)

        builder.apply_overrides(
            [
                ProjectMapping(project_name="lib", path=temp_dir / "one"),
                ProjectMapping(project_name="other", path=temp_dir / "two"),
                ProjectMapping(project_name="lib", path=temp_dir / "three"),
            ]
        )

        assert resource_map.get("lib") == to_location_uri(temp_dir / "three")
        assert resource_map.get("other") == to_location_uri(temp_dir / "two")

    def test_explicit_mapping_uses_given_name(self, resource_map: ResourceMap, temp_dir: Path) -> None:
        """Test that the mapping name, not the directory name, is the key."""
        builder = ResourceMapBuilder(resource_map)

        builder.apply_overrides([ProjectMapping(project_name="sample.emf", path=temp_dir)])

        assert resource_map.snapshot() == {"sample.emf": to_location_uri(temp_dir)}

    def test_incomplete_mappings_are_skipped(self, resource_map: ResourceMap, temp_dir: Path) -> None:
        """Test that mappings without name or path change nothing."""
        builder = ResourceMapBuilder(resource_map)

        builder.apply_overrides(
            [
                ProjectMapping(project_name="no-path"),
                ProjectMapping(path=temp_dir),
                ProjectMapping(),
            ]
        )

        assert len(resource_map) == 0
        assert builder.registrations == []

    def test_apply_overrides_accepts_none(self, resource_map: ResourceMap) -> None:
        """Test that absent mappings are a no-op."""
        ResourceMapBuilder(resource_map).apply_overrides(None)

        assert len(resource_map) == 0
