from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from skill_system.layout import Orientation
from skill_system.models import ResolutionMethod, Trick


# --- Tricks ---

class TrickIn(BaseModel):
    id: str
    name: str
    prerequisite_refs: List[str] = Field(
        default_factory=list,
        description="Prerequisites as ids, names or near-miss spellings of names.",
    )
    difficulty: Optional[int] = None
    category_id: Optional[str] = None

    def to_trick(self) -> Trick:
        return Trick(
            trick_id=self.id,
            name=self.name,
            prerequisite_refs=self.prerequisite_refs,
            difficulty=self.difficulty,
            category_id=self.category_id,
        )


class Category(BaseModel):
    id: str
    name: str
    slug: str
    color: Optional[str] = None


# --- Skill tree rendering ---

class SkillTreeRenderRequest(BaseModel):
    tricks: List[TrickIn]
    completed_ids: List[str] = Field(default_factory=list)
    orientation: Orientation = Orientation.HORIZONTAL


class Position(BaseModel):
    x: float
    y: float


class NodeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    position: Position
    completed: bool
    rank: int
    order: int
    difficulty: Optional[int] = None
    category_color: str


class EdgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    source: str
    target: str
    completed: bool
    type: str
    animated: bool
    style: Dict[str, Any]


class DiagnosticOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    trick_id: str
    raw: str
    reason: str
    method: ResolutionMethod
    distance: Optional[int] = None


class SummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    completed_count: int
    total_count: int
    unresolved_count: int
    label: str


class SkillTreeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    orientation: Orientation
    nodes: List[NodeOut]
    edges: List[EdgeOut]
    summary: SummaryOut
    diagnostics: List[DiagnosticOut]


# --- Completion toggling ---

class ToggleCanDoRequest(BaseModel):
    user_id: str
    trick_id: str = ""
    can_do: bool


class ToggleCanDoResponse(BaseModel):
    success: bool
    can_do: bool
    can_do_count: int
