# models/setlist.py
from pydantic import BaseModel
from typing import List, Optional, Union


class TrackOut(BaseModel):
    id: str
    setPosition: Optional[int] = None
    trackName: str
    timeSignature: Optional[str] = None
    bpm: Union[int, float]
    key: str


class SetlistOut(BaseModel):
    """External representation of a setlist document."""
    id: str
    tracks: List[TrackOut] = []
    total_tracks: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ReorderRequest(BaseModel):
    """Body of PUT /setlist: the full track id sequence in its new order."""
    id: Optional[str] = None
    trackIds: List[str]
