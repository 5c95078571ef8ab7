# tests/test_orchestrator.py

import pytest

from skill_system.completion import CompletionTracker
from skill_system.exceptions import UnknownTrickError
from skill_system.layout import Orientation
from skill_system.models import Trick
from skill_system.orchestrator import (
    COMPLETED_STROKE,
    PENDING_DASHARRAY,
    PENDING_STROKE,
    DEFAULT_CATEGORY_COLOR,
    CompletionChange,
    SkillTreeOrchestrator,
    orientation_for_viewport,
)


@pytest.fixture
def orchestrator(chain_tricks):
    orchestrator = SkillTreeOrchestrator(CompletionTracker(), Orientation.HORIZONTAL)
    orchestrator.set_tricks(chain_tricks)
    return orchestrator


def test_end_to_end_chain(orchestrator):
    tree = orchestrator.render()

    assert [node.id for node in tree.nodes] == ["t1", "t2", "t3"]
    assert [(edge.source, edge.target) for edge in tree.edges] == [("t1", "t2"), ("t2", "t3")]
    assert [node.rank for node in tree.nodes] == [0, 1, 2]
    xs = [node.position["x"] for node in tree.nodes]
    assert xs[0] < xs[1] < xs[2]
    assert [node.label for node in tree.nodes] == ["Safety Roll", "Kong Vault", "Double Kong"]


def test_completion_decoration(orchestrator):
    orchestrator.toggle("t1")
    orchestrator.toggle("t2")

    tree = orchestrator.render()

    assert [node.completed for node in tree.nodes] == [True, True, False]
    assert [edge.completed for edge in tree.edges] == [True, False]
    assert tree.summary.completed_count == 2
    assert tree.summary.total_count == 3
    assert tree.summary.label == "2 / 3"


def test_edge_style_hints(orchestrator):
    orchestrator.toggle("t1")
    orchestrator.toggle("t2")

    done, pending = orchestrator.render().edges

    assert done.id == "t1-t2"
    assert done.animated is True
    assert done.type == "smoothstep"
    assert done.style["stroke"] == COMPLETED_STROKE
    assert pending.animated is False
    assert pending.style["stroke"] == PENDING_STROKE
    assert pending.style["stroke_dasharray"] == PENDING_DASHARRAY


def test_toggle_does_not_rebuild_structure(orchestrator):
    orchestrator.render()
    assert orchestrator.structure_builds == 1

    orchestrator.toggle("t3")
    tree = orchestrator.render()

    assert orchestrator.structure_builds == 1
    assert tree.nodes[2].completed is True


def test_render_is_cached_until_something_changes(orchestrator):
    first = orchestrator.render()

    assert orchestrator.render() is first

    orchestrator.toggle("t1")
    assert orchestrator.render() is not first


def test_orientation_change_rebuilds(orchestrator):
    horizontal = orchestrator.render()
    assert horizontal.nodes[1].position["y"] == 0.0

    orchestrator.set_orientation(Orientation.VERTICAL)
    vertical = orchestrator.render()

    assert orchestrator.structure_builds == 2
    assert vertical.orientation == Orientation.VERTICAL
    assert vertical.nodes[1].position["x"] == 0.0
    assert vertical.nodes[1].position["y"] > 0.0


def test_new_trick_collection_rebuilds_but_same_one_does_not(orchestrator, chain_tricks):
    orchestrator.render()
    orchestrator.set_tricks(chain_tricks)
    orchestrator.render()
    assert orchestrator.structure_builds == 1

    orchestrator.set_tricks(list(chain_tricks) + [Trick("t4", "Dash Vault", ["Safety Roll"])])
    tree = orchestrator.render()

    assert orchestrator.structure_builds == 2
    assert tree.summary.total_count == 4


def test_replaced_collection_is_rebuilt_even_at_a_recycled_address():
    orchestrator = SkillTreeOrchestrator()
    first = [Trick("a", "Safety Roll")]
    orchestrator.set_tricks(first)
    assert [node.id for node in orchestrator.render().nodes] == ["a"]

    # Drop every reference to the first list so its address can be reused
    del first
    orchestrator.set_tricks(())
    fresh = [Trick("b", "Kong Vault")]
    orchestrator.set_tricks(fresh)

    assert [node.id for node in orchestrator.render().nodes] == ["b"]


def test_swapping_tracker_redecorates(orchestrator):
    orchestrator.render()

    orchestrator.tracker = CompletionTracker(["t1"])
    tree = orchestrator.render()

    assert [node.completed for node in tree.nodes] == [True, False, False]
    assert orchestrator.structure_builds == 1


def test_category_color_on_nodes(chain_tricks):
    orchestrator = SkillTreeOrchestrator()
    orchestrator.set_tricks(chain_tricks)
    assert {node.category_color for node in orchestrator.render().nodes} == {DEFAULT_CATEGORY_COLOR}

    orchestrator.category_color = "#f97316"
    tree = orchestrator.render()

    assert {node.category_color for node in tree.nodes} == {"#f97316"}
    assert orchestrator.structure_builds == 1


def test_category_filter():
    tricks = [
        Trick("p1", "Safety Roll", category_id="parkour"),
        Trick("p2", "Kong Vault", ["Safety Roll"], category_id="parkour"),
        Trick("t1", "Back Tuck", category_id="tricking"),
    ]
    orchestrator = SkillTreeOrchestrator()
    orchestrator.set_tricks(tricks)

    orchestrator.set_category("parkour")
    tree = orchestrator.render()

    assert [node.id for node in tree.nodes] == ["p1", "p2"]

    orchestrator.set_category(None)
    assert orchestrator.render().summary.total_count == 3


def test_unresolved_prerequisites_are_surfaced():
    orchestrator = SkillTreeOrchestrator()
    orchestrator.set_tricks([
        Trick("t1", "Safety Roll"),
        Trick("t2", "Kong Vault", ["Wall Run Into Triple Backflip"]),
    ])

    tree = orchestrator.render()

    assert tree.edges == []
    assert tree.summary.unresolved_count == 1
    assert tree.diagnostics[0].raw == "Wall Run Into Triple Backflip"


def test_empty_tree():
    tree = SkillTreeOrchestrator().render()

    assert tree.nodes == []
    assert tree.edges == []
    assert tree.summary.label == "0 / 0"


def test_toggle_reports_persistence_action(orchestrator):
    change = orchestrator.toggle("t1")
    assert change.completed is True
    assert change.action == CompletionChange.UPSERT

    change = orchestrator.toggle("t1")
    assert change.action == CompletionChange.DELETE


def test_toggle_unknown_trick(orchestrator):
    with pytest.raises(UnknownTrickError):
        orchestrator.toggle("nope")


def test_revert_compensates_toggle(orchestrator):
    change = orchestrator.toggle("t2")

    orchestrator.revert(change)

    assert not orchestrator.tracker.is_node_completed("t2")


def test_toggle_and_persist_success(orchestrator):
    persisted = []

    change = orchestrator.toggle_and_persist("t1", persisted.append)

    assert persisted == [change]
    assert orchestrator.tracker.is_node_completed("t1")


def test_toggle_and_persist_failure_reverts(orchestrator):
    def failing_store(change):
        raise ConnectionError("store unavailable")

    with pytest.raises(ConnectionError):
        orchestrator.toggle_and_persist("t1", failing_store)

    assert not orchestrator.tracker.is_node_completed("t1")
    assert orchestrator.render().summary.completed_count == 0


def test_orientation_for_viewport():
    assert orientation_for_viewport(375) == Orientation.VERTICAL
    assert orientation_for_viewport(768) == Orientation.HORIZONTAL
    assert orientation_for_viewport(1440) == Orientation.HORIZONTAL
