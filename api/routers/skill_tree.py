# api/routers/skill_tree.py

from fastapi import APIRouter, Depends, HTTPException
from neo4j import Driver
from typing import List, Optional

from ..database import get_graph_db_driver
from .. import graph_crud, schemas

from skill_system.completion import CompletionTracker
from skill_system.layout import Orientation
from skill_system.models import Trick
from skill_system.orchestrator import SkillTreeOrchestrator, orientation_for_viewport


router = APIRouter(
    prefix="/skill-tree",
    tags=["Skill Tree"],
    responses={404: {"description": "Not found"}},
)


def _choose_orientation(orientation: Optional[Orientation], viewport_width: Optional[int]) -> Orientation:
    # An explicit orientation always wins over the viewport hint
    if orientation is not None:
        return orientation
    if viewport_width is not None:
        return orientation_for_viewport(viewport_width)
    return Orientation.HORIZONTAL


def _render(
    tricks: List[Trick], completed_ids, orientation: Orientation, category_color: Optional[str] = None
) -> schemas.SkillTreeOut:
    orchestrator = SkillTreeOrchestrator(
        CompletionTracker(completed_ids), orientation, category_color=category_color
    )
    orchestrator.set_tricks(tricks)
    return schemas.SkillTreeOut.model_validate(orchestrator.render())


@router.get("/categories", response_model=List[schemas.Category])
def list_categories(driver: Driver = Depends(get_graph_db_driver)):
    """
    Retrieve every active master category that can be shown as a skill tree.
    """
    with driver.session() as session:
        categories = session.execute_read(graph_crud.get_all_categories)
    return categories


@router.post("/render", response_model=schemas.SkillTreeOut)
def render_skill_tree(request: schemas.SkillTreeRenderRequest):
    """
    Lay out a skill tree from tricks supplied in the request body.
    Nothing is read from or written to the database.
    """
    tricks = [trick.to_trick() for trick in request.tricks]
    return _render(tricks, request.completed_ids, request.orientation)


@router.get("/{category_slug}", response_model=schemas.SkillTreeOut)
def get_skill_tree(
    category_slug: str,
    user_id: Optional[str] = None,
    orientation: Optional[Orientation] = None,
    viewport_width: Optional[int] = None,
    driver: Driver = Depends(get_graph_db_driver),
):
    """
    Build the skill tree for one category's published tricks.
    When a user id is given, their completed tricks are marked.
    """
    with driver.session() as session:
        category = session.execute_read(graph_crud.get_category_by_slug, category_slug)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")

        records = session.execute_read(graph_crud.get_published_tricks, category["id"])
        completed_ids = []
        if user_id:
            completed_ids = session.execute_read(graph_crud.get_completed_trick_ids, user_id)

    tricks = [Trick.from_dict(record) for record in records]
    return _render(
        tricks, completed_ids, _choose_orientation(orientation, viewport_width), category.get("color")
    )
