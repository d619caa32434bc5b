# setlist/controllers.py
from fastapi import HTTPException
from pydantic import ValidationError
from typing import Any, Optional
import logging

from models.setlist import ReorderRequest
from repositories.setlist_repository import (
    PersistenceError,
    SetlistRepository,
    serialize_setlist,
)
from setlist.errors import INTERNAL_ERROR_MESSAGE, NotFoundError, TrackValidationError
from setlist.validators import (
    describe_validation_error,
    validate_track_batch,
    validate_track_update,
)

logger = logging.getLogger("setlist.controllers")


def _store_failure(action: str, err: PersistenceError) -> HTTPException:
    logger.error(f"❌ Store error while {action}: {err}", exc_info=err)
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)

# ============================================================
# 🔹 Current setlist
# ============================================================
def fetch_current_setlist(repo: SetlistRepository) -> Optional[dict]:
    try:
        return serialize_setlist(repo.current())
    except PersistenceError as e:
        raise _store_failure("fetching the setlist", e)

# ============================================================
# 🔹 Setlist by id
# ============================================================
def fetch_setlist_by_id(repo: SetlistRepository, setlist_id: str) -> dict:
    try:
        doc = repo.get(setlist_id)
    except PersistenceError as e:
        raise _store_failure(f"fetching setlist {setlist_id}", e)
    if not doc:
        raise NotFoundError("Setlist not found")
    return serialize_setlist(doc)

# ============================================================
# 🔹 Add track(s)
# ============================================================
def add_tracks(repo: SetlistRepository, payload: Any) -> dict:
    """Creates the setlist on first use, otherwise appends to it."""
    tracks = validate_track_batch(payload)
    try:
        doc = repo.append_to_current(tracks)
    except PersistenceError as e:
        raise _store_failure("adding tracks", e)
    logger.info(f"🎵 {len(tracks)} track(s) added to setlist {doc['_id']}")
    return serialize_setlist(doc)

# ============================================================
# 🔹 Edit one track
# ============================================================
def edit_track(repo: SetlistRepository, track_id: str, payload: Any) -> None:
    changes = validate_track_update(track_id, payload)
    try:
        updated = repo.update_track(track_id, changes)
    except PersistenceError as e:
        raise _store_failure(f"updating track {track_id}", e)
    if not updated:
        raise NotFoundError("Track not found")

# ============================================================
# 🔹 Reorder tracks
# ============================================================
def reorder_setlist(repo: SetlistRepository, payload: Any) -> None:
    try:
        request = ReorderRequest.model_validate(payload)
    except ValidationError as e:
        raise TrackValidationError(describe_validation_error(e))

    try:
        doc = repo.get(request.id) if request.id else repo.current()
        if doc is None:
            raise NotFoundError("Setlist not found")
        repo.reorder(doc["_id"], request.trackIds)
    except ValueError as e:
        raise TrackValidationError(str(e))
    except PersistenceError as e:
        raise _store_failure("reordering the setlist", e)

# ============================================================
# 🔹 Delete one track
# ============================================================
def remove_track(repo: SetlistRepository, track_id: str) -> None:
    try:
        repo.remove_track(track_id)
    except PersistenceError as e:
        raise _store_failure(f"removing track {track_id}", e)

# ============================================================
# 🔹 Delete whole setlist
# ============================================================
def remove_setlist(repo: SetlistRepository, setlist_id: str) -> None:
    try:
        repo.delete(setlist_id)
    except PersistenceError as e:
        raise _store_failure(f"deleting setlist {setlist_id}", e)
