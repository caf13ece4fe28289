from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase

from academy_client.models.local_blob import LocalBlobDocument


class LocalStore(Protocol):

    async def get(self, key: str) -> Optional[bytes]: ...

    async def set(self, key: str, blob: bytes) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryLocalStore:

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._blobs: Dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    async def set(self, key: str, blob: bytes) -> None:
        self._blobs[key] = bytes(blob)

    async def delete(self, key: str) -> None:
        self._blobs.pop(key, None)


class MongoLocalStore:
    """Key-value blobs kept in one MongoDB collection, one document per key."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "local_store") -> None:
        self._db = db
        self._collection_name = collection_name

    @property
    def collection(self):
        return self._db[self._collection_name]

    async def get(self, key: str) -> Optional[bytes]:
        doc: Optional[LocalBlobDocument] = await self.collection.find_one({"_id": key})
        if not doc:
            return None
        return bytes(doc.get("blob", b""))

    async def set(self, key: str, blob: bytes) -> None:
        await self.collection.update_one(
            {"_id": key},
            {"$set": {"blob": bytes(blob), "updated_at": datetime.now(timezone.utc)}},
            upsert=True,
        )

    async def delete(self, key: str) -> None:
        await self.collection.delete_one({"_id": key})
