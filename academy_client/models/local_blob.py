from datetime import datetime
from typing import TypedDict


class LocalBlobDocument(TypedDict, total=False):
    # _id is the store key
    _id: str
    blob: bytes
    updated_at: datetime
