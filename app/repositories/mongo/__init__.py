"""MongoDB 저장소 구현 패키지.

MongoDB storage backend, selected with ``STORAGE_BACKEND=mongo``.
"""

from app.repositories.mongo.storage import MongoStorage, MongoStorageFactory, ensure_indexes

__all__ = ["MongoStorage", "MongoStorageFactory", "ensure_indexes"]
