# repositories/setlist_repository.py
from bson import ObjectId
from bson.errors import InvalidId
from datetime import datetime
from functools import wraps
from typing import Dict, Iterable, List, Optional
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError
import logging

from database.connection import DEFAULT_SLOT, SLOT_FIELD

LOG = logging.getLogger("repositories.setlist")


class PersistenceError(Exception):
    """Any failure raised by the document store."""


def _store_errors(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except PyMongoError as e:
            raise PersistenceError(f"{fn.__name__} failed: {e}") from e
    return wrapper


def to_object_id(value) -> Optional[ObjectId]:
    """Parses a hex id; returns None for anything that is not an ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def _now() -> str:
    return datetime.utcnow().isoformat()

# ============================================================
# 🔹 Serializers
# ============================================================
def serialize_track(doc: dict) -> dict:
    track = {k: v for k, v in doc.items() if k != "_id"}
    track["id"] = str(doc.get("_id"))
    return track


def serialize_setlist(doc: Optional[dict]) -> Optional[dict]:
    """Converts a setlist document into its JSON representation."""
    if not doc:
        return None
    tracks = doc.get("tracks", [])
    return {
        "id": str(doc["_id"]),
        "tracks": [serialize_track(t) for t in tracks],
        "total_tracks": len(tracks),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }

# ============================================================
# 🗂️ Setlist repository
# ============================================================
class SetlistRepository:
    """
    Setlist documents keyed by id, each embedding an ordered ``tracks`` array.

    Track-level operations locate the owning document through ``tracks._id``.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    # ---------------------------- reads ----------------------------
    @_store_errors
    def get(self, setlist_id) -> Optional[dict]:
        obj_id = to_object_id(setlist_id)
        if obj_id is None:
            LOG.warning(f"⚠️ Invalid setlist id: {setlist_id}")
            return None
        return self.collection.find_one({"_id": obj_id})

    @_store_errors
    def current(self) -> Optional[dict]:
        """The setlist the id-less endpoints work on."""
        return self.collection.find_one({SLOT_FIELD: DEFAULT_SLOT})

    # ---------------------------- writes ---------------------------
    @staticmethod
    def _track_docs(tracks: Iterable[dict], offset: int) -> List[Dict]:
        docs = []
        for i, track in enumerate(tracks, start=offset + 1):
            doc = {"_id": ObjectId()}
            doc.update(track)
            if doc.get("setPosition") is None:
                doc["setPosition"] = i
            docs.append(doc)
        return docs

    @_store_errors
    def create(self, tracks: Iterable[dict]) -> dict:
        now = _now()
        doc = {
            "_id": ObjectId(),
            SLOT_FIELD: DEFAULT_SLOT,
            "tracks": self._track_docs(tracks, 0),
            "created_at": now,
            "updated_at": now,
        }
        result = self.collection.insert_one(doc)
        LOG.info(f"✅ Setlist created: {result.inserted_id} ({len(doc['tracks'])} tracks)")
        return doc

    @_store_errors
    def append_to_current(self, tracks: List[dict]) -> dict:
        """
        Appends to the end of the current setlist, creating it in the same
        upsert when none exists. Returns the updated document.

        ``setPosition`` defaults come from a prior read and are only a hint
        when writers race; array order stays authoritative.
        """
        existing = self.current()
        offset = len(existing.get("tracks", [])) if existing else 0
        docs = self._track_docs(tracks, offset)
        now = _now()
        update = {
            "$push": {"tracks": {"$each": docs}},
            "$set": {"updated_at": now},
            "$setOnInsert": {"created_at": now},
        }
        try:
            updated = self._upsert_current(update)
        except DuplicateKeyError:
            # another request created the setlist between our match and insert
            LOG.info("🔁 Setlist created concurrently, retrying append as update")
            updated = self._upsert_current(update)
        LOG.info(f"➕ {len(docs)} track(s) appended to setlist {updated['_id']}")
        return updated

    def _upsert_current(self, update: Dict) -> dict:
        return self.collection.find_one_and_update(
            {SLOT_FIELD: DEFAULT_SLOT},
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    @_store_errors
    def update_track(self, track_id, changes: Dict) -> bool:
        """Sets the given fields on one embedded track. False if no such track."""
        obj_id = to_object_id(track_id)
        if obj_id is None:
            return False
        update = {f"tracks.$.{field}": value for field, value in changes.items()}
        update["updated_at"] = _now()
        result = self.collection.update_one({"tracks._id": obj_id}, {"$set": update})
        if result.matched_count == 0:
            LOG.warning(f"⚠️ Track not found for update: {track_id}")
            return False
        LOG.info(f"📝 Track {track_id} updated: {sorted(changes)}")
        return True

    @_store_errors
    def reorder(self, setlist_id, track_ids: List[str]) -> bool:
        """
        Rewrites the track array in the order of ``track_ids``, which must be a
        permutation of the stored ids, and renumbers ``setPosition`` 1..n.
        """
        doc = self.get(setlist_id)
        if doc is None:
            return False
        by_id = {str(t["_id"]): t for t in doc.get("tracks", [])}
        if sorted(by_id) != sorted(track_ids):
            raise ValueError("trackIds must be a permutation of the setlist's track ids")
        ordered = []
        for position, track_id in enumerate(track_ids, start=1):
            track = dict(by_id[track_id])
            track["setPosition"] = position
            ordered.append(track)
        self.collection.update_one(
            {"_id": doc["_id"]},
            {"$set": {"tracks": ordered, "updated_at": _now()}},
        )
        LOG.info(f"🔀 Setlist {setlist_id} reordered ({len(ordered)} tracks)")
        return True

    @_store_errors
    def remove_track(self, track_id) -> bool:
        obj_id = to_object_id(track_id)
        if obj_id is None:
            return False
        result = self.collection.update_one(
            {"tracks._id": obj_id},
            {"$pull": {"tracks": {"_id": obj_id}}, "$set": {"updated_at": _now()}},
        )
        if result.modified_count == 0:
            LOG.warning(f"⚠️ No track to remove with id {track_id}")
            return False
        LOG.info(f"🗑️ Track removed: {track_id}")
        return True

    @_store_errors
    def delete(self, setlist_id) -> bool:
        obj_id = to_object_id(setlist_id)
        if obj_id is None:
            return False
        result = self.collection.delete_one({"_id": obj_id})
        if result.deleted_count == 0:
            LOG.warning(f"⚠️ No setlist to delete with id {setlist_id}")
            return False
        LOG.info(f"🗑️ Setlist deleted: {setlist_id}")
        return True
