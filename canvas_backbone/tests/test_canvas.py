"""Integration tests for the Canvas store and its settings."""

import logging

import pytest
from pydantic import ValidationError

from canvas_backbone.canvas import Canvas, MissingPrerequisiteError
from canvas_backbone.config import CanvasSettings, configure_logging
from canvas_backbone.models.canvas_graph import EdgeStatus, NodeType


@pytest.fixture
def canvas() -> Canvas:
    return Canvas(CanvasSettings())


@pytest.fixture
def strict_canvas() -> Canvas:
    return Canvas(CanvasSettings(enforce_prerequisites=True))


def edge_pairs(canvas: Canvas) -> list[tuple[str, str]]:
    return [(e.source, e.target) for e in canvas.edges]


class TestAddNode:
    """Test node insertion with auto-connected edges."""

    def test_model_then_compiler_then_section(self, canvas):
        """sections wire to the only compiler, compilers get the first model."""
        canvas.add_node(NodeType.model, node_id="m1")
        canvas.add_node(NodeType.compiler, node_id="c1")
        canvas.add_node(NodeType.design_brief, node_id="s1")
        assert edge_pairs(canvas) == [("m1", "c1"), ("s1", "c1")]
        assert all(e.data.status == EdgeStatus.idle for e in canvas.edges)

    def test_first_compiler_collects_sections(self, canvas):
        canvas.add_node("design-brief", node_id="s1")
        canvas.add_node("research-context", node_id="s2")
        canvas.add_node("compiler", node_id="c1")
        assert edge_pairs(canvas) == [("s1", "c1"), ("s2", "c1")]

    def test_second_compiler_is_not_auto_wired(self, canvas):
        canvas.add_node("compiler", node_id="c1")
        canvas.add_node("design-brief", node_id="s1")
        canvas.add_node("compiler", node_id="c2")
        canvas.add_node("existing-design", node_id="s2")
        assert edge_pairs(canvas) == [("s1", "c1")]

    def test_design_system_and_hypothesis(self, canvas):
        canvas.add_node("model", node_id="m1")
        canvas.add_node("hypothesis", node_id="h1")
        canvas.add_node("design-system", node_id="ds1")
        canvas.add_node("hypothesis", node_id="h2")
        assert edge_pairs(canvas) == [
            ("m1", "h1"),
            ("ds1", "h1"),
            ("m1", "ds1"),
            ("ds1", "h2"),
            ("m1", "h2"),
        ]

    def test_sections_are_singletons(self, canvas):
        first = canvas.add_node("design-brief")
        second = canvas.add_node("design-brief")
        assert first is not None
        assert second is None
        assert len(canvas.nodes) == 1

    def test_generates_prefixed_ids(self, canvas):
        node = canvas.add_node(NodeType.variant)
        assert node.id.startswith("variant-")
        assert node.type == "variant"

    def test_rejects_duplicate_node_id(self, canvas):
        canvas.add_node("variant", node_id="v1")
        with pytest.raises(ValueError):
            canvas.add_node("critique", node_id="v1")

    def test_missing_prerequisite_warns_by_default(self, canvas, caplog):
        with caplog.at_level(logging.WARNING, logger="canvas_backbone"):
            node = canvas.add_node("compiler", node_id="c1")
        assert node is not None
        assert "model" in caplog.text

    def test_missing_prerequisite_raises_when_enforced(self, strict_canvas):
        with pytest.raises(MissingPrerequisiteError) as exc_info:
            strict_canvas.add_node("hypothesis")
        assert exc_info.value.node_type == "hypothesis"
        assert exc_info.value.required_type == "model"
        assert isinstance(exc_info.value, ValueError)
        assert strict_canvas.nodes == []

    def test_enforced_add_succeeds_with_model(self, strict_canvas):
        strict_canvas.add_node("model", node_id="m1")
        strict_canvas.add_node("design-system", node_id="ds1")
        assert edge_pairs(strict_canvas) == [("m1", "ds1")]

    def test_missing_prerequisite_query(self, canvas):
        assert canvas.missing_prerequisite(NodeType.compiler) is NodeType.model
        canvas.add_node("model")
        assert canvas.missing_prerequisite(NodeType.compiler) is None


class TestInitialize:
    def test_seeds_brief_and_compiler(self, canvas):
        canvas.initialize()
        types = [n.type for n in canvas.nodes]
        assert types == ["design-brief", "compiler"]
        brief, compiler = canvas.nodes
        assert edge_pairs(canvas) == [(brief.id, compiler.id)]

    def test_noop_when_not_empty(self, canvas):
        canvas.add_node("variant", node_id="v1")
        canvas.initialize()
        assert [n.id for n in canvas.nodes] == ["v1"]


class TestExpandNode:
    """Test spawning children that inherit the parent's model."""

    def test_compiler_spawns_hypotheses(self, canvas):
        canvas.add_node("model", node_id="m1")
        canvas.add_node("model", node_id="m2")
        canvas.add_node("compiler", node_id="c1")
        canvas.connect("m2", "c1")

        children = canvas.expand_node("c1", NodeType.hypothesis, count=2)

        assert len(children) == 2
        for child in children:
            assert ("c1", child.id) in edge_pairs(canvas)
            assert ("m1", child.id) in edge_pairs(canvas)
            assert ("m2", child.id) in edge_pairs(canvas)

    def test_falls_back_to_first_model(self, canvas):
        canvas.add_node("compiler", node_id="c1")
        canvas.add_node("model", node_id="m1")
        (child,) = canvas.expand_node("c1", "hypothesis")
        assert edge_pairs(canvas) == [("c1", child.id), ("m1", child.id)]

    def test_no_parent_edge_when_invalid(self, canvas):
        canvas.add_node("critique", node_id="cr1")
        (child,) = canvas.expand_node("cr1", "hypothesis")
        assert edge_pairs(canvas) == []
        assert canvas.get_node(child.id) is not None

    def test_unknown_parent(self, canvas):
        with pytest.raises(KeyError):
            canvas.expand_node("missing", "hypothesis")

    def test_non_positive_count(self, canvas):
        canvas.add_node("compiler", node_id="c1")
        with pytest.raises(ValueError):
            canvas.expand_node("c1", "hypothesis", count=0)

    def test_enforces_prerequisite(self, strict_canvas):
        """children that need a model are refused when none exists."""
        strict_canvas.add_node("variant", node_id="v1")
        with pytest.raises(MissingPrerequisiteError) as exc_info:
            strict_canvas.expand_node("v1", "compiler")
        assert exc_info.value.required_type == "model"
        assert [n.id for n in strict_canvas.nodes] == ["v1"]
        assert strict_canvas.missing_prerequisite("compiler") is NodeType.model

    def test_prerequisite_warns_when_not_enforced(self, canvas, caplog):
        canvas.add_node("variant", node_id="v1")
        with caplog.at_level(logging.WARNING, logger="canvas_backbone"):
            (child,) = canvas.expand_node("v1", "compiler")
        assert child.type == "compiler"
        assert "model" in caplog.text

    def test_section_children_are_singletons(self, canvas):
        canvas.add_node("variant", node_id="v1")
        canvas.add_node("existing-design", node_id="e1")
        assert canvas.expand_node("v1", "existing-design") == []
        assert [n.id for n in canvas.nodes if n.type == "existing-design"] == ["e1"]

    def test_section_child_added_when_absent(self, canvas):
        canvas.add_node("variant", node_id="v1")
        (child,) = canvas.expand_node("v1", NodeType.existing_design)
        assert edge_pairs(canvas) == [("v1", child.id)]

    def test_section_child_count_above_one(self, canvas):
        canvas.add_node("variant", node_id="v1")
        with pytest.raises(ValueError):
            canvas.expand_node("v1", "existing-design", count=2)
        assert [n.id for n in canvas.nodes] == ["v1"]


class TestConnect:
    """Test manual connections."""

    def test_valid_connection(self, canvas):
        canvas.add_node("hypothesis", node_id="h1")
        canvas.add_node("variant", node_id="v1")
        edge = canvas.connect("h1", "v1")
        assert edge.id == "edge-h1-to-v1"
        assert edge.data.status == EdgeStatus.idle

    def test_rejects_invalid_pair(self, canvas):
        canvas.add_node("hypothesis", node_id="h1")
        canvas.add_node("variant", node_id="v1")
        assert canvas.connect("v1", "h1") is None
        assert canvas.edges == []

    def test_rejects_unknown_nodes(self, canvas):
        canvas.add_node("variant", node_id="v1")
        assert not canvas.is_valid_connection("v1", "nowhere")
        assert canvas.connect("nowhere", "v1") is None

    def test_rejects_duplicates(self, canvas):
        canvas.add_node("variant", node_id="v1")
        canvas.add_node("critique", node_id="cr1")
        assert canvas.connect("v1", "cr1") is not None
        assert canvas.connect("v1", "cr1") is None
        assert len(canvas.edges) == 1


class TestRemovalAndStatus:
    """Test edge removal and status updates."""

    @pytest.fixture
    def wired(self, canvas) -> Canvas:
        canvas.add_node("model", node_id="m1")
        canvas.add_node("compiler", node_id="c1")
        canvas.add_node("design-brief", node_id="s1")
        canvas.add_node("hypothesis", node_id="h1")
        canvas.connect("c1", "h1")
        return canvas

    def test_remove_node_drops_incident_edges(self, wired):
        wired.remove_node("c1")
        assert wired.get_node("c1") is None
        assert edge_pairs(wired) == [("m1", "h1")]

    def test_remove_unknown_node_is_noop(self, wired):
        before = wired.edges
        wired.remove_node("missing")
        assert wired.edges == before

    def test_remove_edge(self, wired):
        wired.remove_edge("edge-s1-to-c1")
        assert wired.get_edge("edge-s1-to-c1") is None
        assert ("s1", "c1") not in edge_pairs(wired)

    def test_disconnect_outputs(self, wired):
        wired.disconnect_outputs("m1")
        assert all(e.source != "m1" for e in wired.edges)
        assert ("s1", "c1") in edge_pairs(wired)

    def test_set_status_by_source(self, wired):
        wired.set_edge_status_by_source("m1", EdgeStatus.processing)
        for edge in wired.edges:
            expected = EdgeStatus.processing if edge.source == "m1" else EdgeStatus.idle
            assert edge.data.status == expected

    def test_set_status_by_target(self, wired):
        wired.set_edge_status_by_target("c1", "complete")
        statuses = {e.id: e.data.status for e in wired.edges if e.target == "c1"}
        assert set(statuses.values()) == {EdgeStatus.complete}

    def test_set_status_rejects_unknown_value(self, wired):
        with pytest.raises(ValidationError):
            wired.set_edge_status_by_target("c1", "finished")

    def test_update_node_data_merges(self, wired):
        wired.update_node_data("h1", {"title": "Bold"})
        wired.update_node_data("h1", {"refId": "r1"})
        assert wired.get_node("h1").data == {"title": "Bold", "refId": "r1"}

    def test_lineage(self, wired):
        wired.add_node("variant", node_id="v1")
        lineage = wired.lineage("s1")
        assert lineage.node_ids == {"m1", "c1", "s1", "h1"}
        assert "edge-s1-to-c1" in lineage.edge_ids

    def test_lineage_empty_for_isolated_or_unselected(self, wired):
        wired.add_node("variant", node_id="v1")
        assert wired.lineage("v1").node_ids == set()
        assert wired.lineage(None).edge_ids == set()


class TestSnapshot:
    def test_round_trip(self, canvas):
        canvas.add_node("model", node_id="m1")
        canvas.add_node("compiler", node_id="c1")
        restored = Canvas.from_snapshot(canvas.snapshot(), CanvasSettings())
        assert restored.nodes == canvas.nodes
        assert restored.edges == canvas.edges
        assert restored.created_at == canvas.created_at

    def test_snapshot_is_detached(self, canvas):
        """editing a snapshot in place leaves the canvas untouched, and back."""
        canvas.add_node("variant", node_id="v1", data={"title": "A"})
        snapshot = canvas.snapshot()
        snapshot.nodes[0].data["title"] = "B"
        assert canvas.get_node("v1").data == {"title": "A"}

        restored = Canvas.from_snapshot(snapshot, CanvasSettings())
        snapshot.nodes[0].data["title"] = "C"
        assert restored.get_node("v1").data == {"title": "B"}

    def test_reset(self, canvas):
        canvas.add_node("model")
        canvas.reset()
        assert canvas.nodes == []
        assert canvas.edges == []
        assert repr(canvas) == "Canvas(nodes=0, edges=0)"


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CANVAS_ENFORCE_PREREQUISITES", raising=False)
        monkeypatch.delenv("CANVAS_LOG_LEVEL", raising=False)
        settings = CanvasSettings.from_env()
        assert settings.enforce_prerequisites is False
        assert settings.log_level == "WARNING"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CANVAS_ENFORCE_PREREQUISITES", "TRUE")
        monkeypatch.setenv("CANVAS_LOG_LEVEL", "debug")
        settings = CanvasSettings.from_env()
        assert settings.enforce_prerequisites is True
        assert settings.log_level == "DEBUG"

    def test_canvas_uses_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("CANVAS_ENFORCE_PREREQUISITES", "true")
        with pytest.raises(MissingPrerequisiteError):
            Canvas().add_node("compiler")

    def test_configure_logging(self):
        logger = configure_logging("DEBUG")
        assert logger.name == "canvas_backbone"
        assert logger.level == logging.DEBUG
        configure_logging(logging.WARNING)
