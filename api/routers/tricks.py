# api/routers/tricks.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from neo4j import Driver
from neo4j.exceptions import DriverError, Neo4jError

from ..database import get_graph_db_driver
from .. import graph_crud, schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tricks", tags=["Tricks"])


@router.post("/toggle-can-do", response_model=schemas.ToggleCanDoResponse)
def toggle_can_do(
    request: schemas.ToggleCanDoRequest, driver: Driver = Depends(get_graph_db_driver)
):
    """
    Persist one completion change for a user.
    - can_do = true upserts the completion record and stamps achieved_at.
    - can_do = false deletes it.
    Returns how many users can now do the trick. Callers revert their
    in-memory toggle when this request fails.
    """
    if not request.trick_id.strip():
        raise HTTPException(status_code=400, detail="Trick ID is required")

    try:
        with driver.session() as session:
            if not session.execute_read(graph_crud.trick_exists, request.trick_id):
                raise HTTPException(status_code=404, detail="Trick not found")

            if request.can_do:
                session.execute_write(
                    graph_crud.mark_trick_completed, request.user_id, request.trick_id
                )
            else:
                session.execute_write(
                    graph_crud.unmark_trick_completed, request.user_id, request.trick_id
                )

            can_do_count = session.execute_read(
                graph_crud.count_trick_completions, request.trick_id
            )
    except (Neo4jError, DriverError) as e:
        logger.error("Error updating completion of trick %s: %s", request.trick_id, e)
        raise HTTPException(status_code=500, detail="Failed to update trick status")

    return schemas.ToggleCanDoResponse(
        success=True, can_do=request.can_do, can_do_count=can_do_count or 0
    )
