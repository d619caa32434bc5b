# database/connection.py
import logging
from typing import Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from config import settings

logger = logging.getLogger("database.connection")

# Unique-indexed field every setlist document carries: one document per slot.
SLOT_FIELD = "slot"
DEFAULT_SLOT = "default"

# ============================================================
# 🔧 HIDE CREDENTIALS BEFORE LOGGING A URI
# ============================================================
def redact_uri(uri: str) -> str:
    scheme, sep, rest = uri.partition("://")
    if not sep or "@" not in rest:
        return uri
    return f"{scheme}://***@{rest.split('@', 1)[1]}"

# ============================================================
# 🎵 SETLIST STORE GATEWAY
# ============================================================
class MongoGateway:
    """
    Owns the MongoClient for one database URL and hands out the single
    collection that holds setlist documents.

    ``client_factory`` defaults to pymongo's ``MongoClient``; any callable with
    the same signature (e.g. ``mongomock.MongoClient``) can be injected.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        collection_name: Optional[str] = None,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ):
        self.database_url = database_url or settings.DATABASE_URL
        self.collection_name = collection_name or settings.SETLIST_COLLECTION
        self._client_factory = client_factory
        self.client: Optional[MongoClient] = None
        self.db: Optional[Database] = None

    @property
    def connected(self) -> bool:
        return self.client is not None

    def connect(self) -> "MongoGateway":
        if self.connected:
            return self
        try:
            client = self._client_factory(self.database_url)
            db = client.get_default_database(default=settings.MONGO_DB)
        except Exception:
            logger.exception(f"❌ Error connecting to MongoDB at {redact_uri(self.database_url)}")
            raise
        self.client, self.db = client, db
        logger.info(f"✅ Connected to {redact_uri(self.database_url)} (db: {db.name})")
        self.ensure_indexes()
        return self

    def ensure_indexes(self) -> None:
        try:
            self.collection.create_index(SLOT_FIELD, unique=True)
        except Exception as e:
            logger.warning(f"⚠️ Could not create unique index on '{SLOT_FIELD}': {e}")

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.client.close()
        logger.info(f"🔌 Disconnected from {redact_uri(self.database_url)}")
        self.client, self.db = None, None

    @property
    def collection(self) -> Collection:
        if self.db is None:
            raise RuntimeError("MongoGateway is not connected; call connect() first.")
        return self.db[self.collection_name]

    def drop_database(self) -> None:
        """Drop the whole database. Used by test teardown."""
        if self.db is not None:
            logger.warning(f"⚠️ Dropping database {self.db.name}")
            self.client.drop_database(self.db.name)
