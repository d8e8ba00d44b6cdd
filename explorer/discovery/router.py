"""
Route definitions for the explorer API.

Endpoints under /api/explorer:
- GET    /presets                                   : list query presets
- POST   /sessions                                  : open a session
- GET    /sessions/{session_id}                     : current view
- DELETE /sessions/{session_id}                     : drop a session
- POST   /sessions/{session_id}/search              : submit a query
- POST   /sessions/{session_id}/presets/{preset_id} : search a preset
- PUT    /sessions/{session_id}/filters             : change filters
- PUT    /sessions/{session_id}/sort                : change sort mode
- POST   /sessions/{session_id}/pages/next          : next page
- POST   /sessions/{session_id}/pages/previous      : previous page

A failed catalogue search is not an HTTP error: the view comes back with
the previous results and ``error_message`` set, and the client decides
whether to show the stale list under an error banner.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from .presets import UnknownPreset
from .schemas import ExplorerView, FilterCriteria, Preset, SortMode
from .session import ExplorerSession
from .store import SessionRegistry, UnknownSession


class SearchRequest(BaseModel):
    query: Optional[str] = None


class SortRequest(BaseModel):
    mode: SortMode


class SessionCreated(BaseModel):
    session_id: str
    view: ExplorerView


router = APIRouter(prefix="/api/explorer", tags=["explorer"])


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> ExplorerSession:
    try:
        return registry.get(session_id)
    except UnknownSession:
        raise HTTPException(status_code=404, detail="Session not found")


@router.get("/presets", response_model=List[Preset])
async def list_presets(registry: SessionRegistry = Depends(get_registry)) -> List[Preset]:
    return registry.presets.list_presets()


@router.post("/sessions", response_model=SessionCreated, status_code=201)
async def create_session(registry: SessionRegistry = Depends(get_registry)) -> SessionCreated:
    session_id, session = registry.create()
    return SessionCreated(session_id=session_id, view=session.view())


@router.get("/sessions/{session_id}", response_model=ExplorerView)
async def get_view(session: ExplorerSession = Depends(get_session)) -> ExplorerView:
    return session.view()


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> None:
    try:
        registry.remove(session_id)
    except UnknownSession:
        raise HTTPException(status_code=404, detail="Session not found")


@router.post("/sessions/{session_id}/search", response_model=ExplorerView)
async def search(payload: SearchRequest, session: ExplorerSession = Depends(get_session)) -> ExplorerView:
    await session.submit(payload.query)
    return session.view()


@router.post("/sessions/{session_id}/presets/{preset_id}", response_model=ExplorerView)
async def select_preset(preset_id: str, session: ExplorerSession = Depends(get_session)) -> ExplorerView:
    try:
        await session.select_preset(preset_id)
    except UnknownPreset:
        raise HTTPException(status_code=404, detail="Preset not found")
    return session.view()


@router.put("/sessions/{session_id}/filters", response_model=ExplorerView)
async def set_filters(criteria: FilterCriteria, session: ExplorerSession = Depends(get_session)) -> ExplorerView:
    session.set_criteria(criteria)
    return session.view()


@router.put("/sessions/{session_id}/sort", response_model=ExplorerView)
async def set_sort(payload: SortRequest, session: ExplorerSession = Depends(get_session)) -> ExplorerView:
    session.set_sort_mode(payload.mode)
    return session.view()


@router.post("/sessions/{session_id}/pages/next", response_model=ExplorerView)
async def next_page(session: ExplorerSession = Depends(get_session)) -> ExplorerView:
    session.go_to_next_page()
    return session.view()


@router.post("/sessions/{session_id}/pages/previous", response_model=ExplorerView)
async def previous_page(session: ExplorerSession = Depends(get_session)) -> ExplorerView:
    session.go_to_previous_page()
    return session.view()
