# setlist/validators.py
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.track import REQUIRED_FIELDS, Track, TrackUpdate
from setlist.errors import TrackValidationError


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def describe_validation_error(exc: ValidationError) -> str:
    """First pydantic error as a single readable line."""
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or "body"
    return f"Invalid value for {field}: {err.get('msg')}"


def extract_tracks(payload: Any) -> List[Any]:
    """Accepts ``{"track": {...}}`` or ``{"tracks": [...]}``."""
    if not isinstance(payload, dict):
        raise TrackValidationError("Request body must be a JSON object.")
    if "tracks" in payload:
        tracks = payload["tracks"]
    elif "track" in payload:
        tracks = [payload["track"]]
    else:
        raise TrackValidationError("Must specify a track or a list of tracks.")
    if not isinstance(tracks, list) or not tracks:
        raise TrackValidationError("Must specify at least one track.")
    return tracks


def validate_track_batch(payload: Any) -> List[Dict]:
    """
    Validates every submitted track before anything is persisted; the first
    failure rejects the whole batch.
    """
    tracks = extract_tracks(payload)
    for field in REQUIRED_FIELDS:
        for track in tracks:
            if not isinstance(track, dict) or _is_blank(track.get(field)):
                raise TrackValidationError(f"Must specify a value for {field}")

    validated = []
    for track in tracks:
        try:
            validated.append(Track.model_validate(track).model_dump())
        except ValidationError as e:
            raise TrackValidationError(describe_validation_error(e))
    return validated


def _body_id(body: Dict) -> Optional[str]:
    for name in ("id", "_id"):
        if body.get(name) is not None:
            return str(body[name])
    return None


def validate_track_update(track_id: str, payload: Any) -> Dict:
    """Returns the field changes for PUT /track/{id}."""
    if not isinstance(payload, dict):
        raise TrackValidationError("Request body must be a JSON object.")
    body = payload.get("track", payload)
    if not isinstance(body, dict):
        raise TrackValidationError("track must be a JSON object.")

    body_id = _body_id(body)
    if body_id is not None and body_id != track_id:
        raise TrackValidationError(
            f"Request path id ({track_id}) and request body id ({body_id}) must match."
        )

    try:
        update = TrackUpdate.model_validate({k: v for k, v in body.items() if k not in ("id", "_id")})
    except ValidationError as e:
        raise TrackValidationError(describe_validation_error(e))

    changes = update.changes()
    if not changes:
        raise TrackValidationError("Must specify at least one of trackName, key, bpm.")
    return changes
