# setlist/routes.py
from fastapi import APIRouter, Body, Depends, Request, Response
from typing import Optional
from models.setlist import SetlistOut
from repositories.setlist_repository import SetlistRepository
from setlist.controllers import (
    add_tracks,
    edit_track,
    fetch_current_setlist,
    fetch_setlist_by_id,
    remove_setlist,
    remove_track,
    reorder_setlist,
)
import logging

router = APIRouter()
LOG = logging.getLogger("setlist.routes")


def get_repository(request: Request) -> SetlistRepository:
    return SetlistRepository(request.app.state.gateway.collection)

# ============================================================
# 🔹 Current setlist (JSON null when none exists yet)
# ============================================================
@router.get("/setlist", response_model=Optional[SetlistOut], summary="Get the current setlist")
def get_setlist(repo: SetlistRepository = Depends(get_repository)):
    return fetch_current_setlist(repo)

# ============================================================
# 🔹 Setlist by id
# ============================================================
@router.get("/setlist/{setlist_id}", response_model=SetlistOut, summary="Get a setlist by id")
def get_setlist_by_id(setlist_id: str, repo: SetlistRepository = Depends(get_repository)):
    LOG.info(f"🔎 Looking up setlist {setlist_id}")
    return fetch_setlist_by_id(repo, setlist_id)

# ============================================================
# 🔹 Append track(s)
# ============================================================
@router.post("/track", status_code=201, response_model=SetlistOut, summary="Append track(s) to the setlist")
def post_track(payload: dict = Body(...), repo: SetlistRepository = Depends(get_repository)):
    """
    Accepts a single track or a batch:
    {"track": {"trackName": "Green", "key": "G", "bpm": 145}}
    {"tracks": [{...}, {...}]}
    """
    return add_tracks(repo, payload)

# ============================================================
# 🔹 Edit one track's fields
# ============================================================
@router.put("/track/{track_id}", status_code=204, summary="Edit a track's name, key or bpm")
def put_track(track_id: str, payload: dict = Body(...), repo: SetlistRepository = Depends(get_repository)):
    edit_track(repo, track_id, payload)
    return Response(status_code=204)

# ============================================================
# 🔹 Reorder tracks
# ============================================================
@router.put("/setlist", status_code=204, summary="Reorder tracks by id")
def put_setlist(payload: dict = Body(...), repo: SetlistRepository = Depends(get_repository)):
    """Body: {"trackIds": ["<id>", ...]} holding every track id exactly once."""
    reorder_setlist(repo, payload)
    return Response(status_code=204)

# ============================================================
# 🔹 Delete one track
# ============================================================
@router.delete("/track/{track_id}", status_code=204, summary="Remove a track")
def delete_track(track_id: str, repo: SetlistRepository = Depends(get_repository)):
    remove_track(repo, track_id)
    return Response(status_code=204)

# ============================================================
# 🔹 Delete whole setlist
# ============================================================
@router.delete("/setlist/{setlist_id}", status_code=204, summary="Remove a setlist")
def delete_setlist(setlist_id: str, repo: SetlistRepository = Depends(get_repository)):
    remove_setlist(repo, setlist_id)
    return Response(status_code=204)
