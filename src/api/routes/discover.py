"""
Discover Queue Routes.

Endpoints that feed presentation events (gesture end, reject tap, undo tap,
reset tap) into a per-session DiscoverEngine and return its read-only state.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from services.session_manager import (
    DiscoverSession,
    DiscoverSessionManager,
    get_discover_session_manager,
)


router = APIRouter(prefix="/api/discover", tags=["Discover"])


def get_session_manager() -> DiscoverSessionManager:
    """Dependency returning the discover session manager."""
    return get_discover_session_manager()


def get_session(
    session_id: str,
    sessions: DiscoverSessionManager = Depends(get_session_manager),
) -> DiscoverSession:
    """Resolve the path's session; SessionNotFoundError becomes a 404."""
    return sessions.require_session(session_id)


# =============================================================================
# Request/Response Models
# =============================================================================

class GestureRequest(BaseModel):
    """Discrete outcome reported by the gesture recognizer."""
    outcome: Literal["left", "right", "none"] = Field(
        ..., description="left = like, right = seen, none = no decision"
    )


class DiscoverParamsResponse(BaseModel):
    year: Optional[int] = None
    sort_by: str
    page: int


class SessionStateResponse(BaseModel):
    session_id: str
    current: Optional[Union[int, str]] = None
    size: int
    undo_available: bool
    params: DiscoverParamsResponse


class GestureResponse(SessionStateResponse):
    decision: str


class DecisionListsResponse(BaseModel):
    session_id: str
    wishlist: List[Union[int, str]]
    seenlist: List[Union[int, str]]


def _state(session: DiscoverSession) -> Dict[str, Any]:
    return session.to_dict()


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/sessions", summary="Start a discover session", response_model=SessionStateResponse)
async def create_session(
    sessions: DiscoverSessionManager = Depends(get_session_manager),
) -> Dict[str, Any]:
    """Create a session and request its first batch of candidates."""
    return _state(sessions.create_session())


@router.get("/sessions/{session_id}", response_model=SessionStateResponse)
async def get_state(session: DiscoverSession = Depends(get_session)) -> Dict[str, Any]:
    return _state(session)


@router.post("/sessions/{session_id}/gesture", response_model=GestureResponse)
async def gesture_end(
    request: GestureRequest,
    session: DiscoverSession = Depends(get_session),
) -> Dict[str, Any]:
    """Apply a finished drag to the current candidate."""
    decision = session.engine.gesture_end(request.outcome)
    return {**_state(session), "decision": decision.value}


@router.post("/sessions/{session_id}/reject", response_model=SessionStateResponse)
async def manual_reject(session: DiscoverSession = Depends(get_session)) -> Dict[str, Any]:
    """Skip the current candidate without recording a decision."""
    session.engine.manual_reject()
    return _state(session)


@router.post("/sessions/{session_id}/undo", response_model=SessionStateResponse)
async def undo(session: DiscoverSession = Depends(get_session)) -> Dict[str, Any]:
    """Bring back the last removed candidate (no-op when nothing to undo)."""
    session.engine.undo()
    return _state(session)


@router.post("/sessions/{session_id}/reset", response_model=SessionStateResponse)
async def reset(session: DiscoverSession = Depends(get_session)) -> Dict[str, Any]:
    """Drop the queue, roll new discover params and refetch."""
    session.engine.reset()
    return _state(session)


@router.get("/sessions/{session_id}/lists", response_model=DecisionListsResponse)
async def decision_lists(session: DiscoverSession = Depends(get_session)) -> Dict[str, Any]:
    return {
        "session_id": session.session_id,
        "wishlist": list(session.dispatcher.wishlist),
        "seenlist": list(session.dispatcher.seenlist),
    }


@router.delete("/sessions/{session_id}")
async def end_session(
    session_id: str,
    sessions: DiscoverSessionManager = Depends(get_session_manager),
) -> Dict[str, Any]:
    if not sessions.delete_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {"session_id": session_id, "deleted": True}
