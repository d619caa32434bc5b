# models/track.py
from pydantic import BaseModel, field_validator
from typing import Optional, Union

# Fields a new track must carry with a non-blank value.
REQUIRED_FIELDS = ("trackName", "key", "bpm")

# Fields PUT /track/{id} is allowed to change.
EDITABLE_FIELDS = ("trackName", "key", "bpm")


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _positive(value):
    if value <= 0:
        raise ValueError("must be greater than 0")
    return value


class Track(BaseModel):
    """A track as submitted by the client, before it gets an id."""
    setPosition: Optional[int] = None
    trackName: str
    timeSignature: Optional[str] = None
    bpm: Union[int, float]
    key: str

    @field_validator("trackName", "key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("bpm")
    @classmethod
    def _bpm_positive(cls, value):
        return _positive(value)


class TrackUpdate(BaseModel):
    """Partial edit of one track; unset fields are left alone."""
    trackName: Optional[str] = None
    bpm: Optional[Union[int, float]] = None
    key: Optional[str] = None

    @field_validator("trackName", "key")
    @classmethod
    def _not_blank(cls, value):
        return None if value is None else _strip_required(value)

    @field_validator("bpm")
    @classmethod
    def _bpm_positive(cls, value):
        return None if value is None else _positive(value)

    def changes(self) -> dict:
        return {
            field: value
            for field, value in self.model_dump(include=set(EDITABLE_FIELDS)).items()
            if value is not None
        }
