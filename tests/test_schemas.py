import pytest
from pydantic import ValidationError

from api.schemas import SkillTreeOut, SkillTreeRenderRequest, ToggleCanDoRequest, TrickIn
from skill_system.completion import CompletionTracker
from skill_system.layout import Orientation
from skill_system.orchestrator import SkillTreeOrchestrator


def test_trick_in_converts_to_engine_trick():
    """
    Tests that an API payload becomes the engine's Trick with the same fields.
    """
    # 1. Arrange
    payload = TrickIn(id="t2", name="Kong Vault", prerequisite_refs=["Safety Roll"], difficulty=2)

    # 2. Act
    trick = payload.to_trick()

    # 3. Assert
    assert trick.trick_id == "t2"
    assert trick.name == "Kong Vault"
    assert trick.prerequisite_refs == ["Safety Roll"]
    assert trick.difficulty == 2
    assert trick.category_id is None


def test_render_request_defaults():
    request = SkillTreeRenderRequest(tricks=[])

    assert request.completed_ids == []
    assert request.orientation == Orientation.HORIZONTAL


def test_skill_tree_out_reads_render_tree(chain_tricks):
    orchestrator = SkillTreeOrchestrator(CompletionTracker(["t1"]))
    orchestrator.set_tricks(chain_tricks)

    tree = SkillTreeOut.model_validate(orchestrator.render())

    assert tree.nodes[0].completed is True
    assert tree.nodes[0].position.x == 0.0
    assert tree.edges[0].id == "t1-t2"
    assert tree.edges[0].style["stroke_dasharray"] == "5,5"
    assert tree.summary.label == "1 / 3"


def test_toggle_request_requires_can_do():
    with pytest.raises(ValidationError):
        ToggleCanDoRequest(user_id="user-1", trick_id="t1")
