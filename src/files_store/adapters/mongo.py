"""
MongoDB store.

File content goes to a GridFS bucket; one metadata record per file goes to a
regular collection, keyed by the hex form of the GridFS file id.
"""

import logging
from datetime import datetime, timezone
from typing import Iterator, Optional

import pydantic
from bson import ObjectId
from bson.errors import InvalidId
from gridfs import GridFSBucket
from gridfs.errors import NoFile
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from files_store import sniffing
from files_store.adapters.storage import BaseStore
from files_store.config.settings import Settings
from files_store.errors import (
    BackendError,
    InvalidKeyError,
    NotFoundError,
    UnknownFileTypeError,
)
from files_store.schemas import FileInput, FileMetadata

logger = logging.getLogger(__name__)


def parse_key(key: str) -> ObjectId:
    """Parse a key into a GridFS file id without touching the database."""
    try:
        return ObjectId(key)
    except (InvalidId, TypeError):
        raise InvalidKeyError(key)


class GridOutChunks:
    """One-shot iterator over the chunks of a GridFS download stream.

    The stream is closed once the chunks are exhausted, or earlier through
    ``close()`` when the consumer gives up before reading everything.
    """

    def __init__(self, grid_out):
        self._grid_out = grid_out
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        try:
            while not self.closed:
                chunk = self._grid_out.readchunk()
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._grid_out.close()


class MongoStore(BaseStore):
    """Store backed by a GridFS bucket and a metadata collection.

    The bucket and collection handles are shared as-is across requests:
    pymongo clients are thread-safe and pool their own connections.
    """

    def __init__(self, bucket: GridFSBucket, collection: Collection, client: Optional[MongoClient] = None):
        self.bucket = bucket
        self.collection = collection
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoStore":
        client = MongoClient(settings.mongodb_url)
        db = client[settings.database_name]
        bucket = GridFSBucket(db, bucket_name=settings.bucket_name)
        collection = db[settings.collection_name]
        logger.info(
            "MongoStore using database '%s', bucket '%s', collection '%s'",
            settings.database_name,
            settings.bucket_name,
            settings.collection_name,
        )
        return cls(bucket, collection, client=client)

    def put(self, file: FileInput) -> str:
        mime = sniffing.detect(file.bytes)
        if mime is None:
            raise UnknownFileTypeError()

        try:
            file_id = self.bucket.upload_from_stream(file.name, file.bytes)
        except PyMongoError as e:
            logger.error("Blob upload of '%s' failed: %s", file.name, e)
            raise BackendError(f"blob upload failed: {e}") from e

        key = str(file_id)
        record = FileMetadata(
            name=file.name,
            mime=mime,
            owner=file.owner,
            key=key,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            self.collection.insert_one(record.to_document())
        except PyMongoError as e:
            logger.error("Metadata insert for %s failed: %s", key, e)
            self._discard_blob(file_id)
            raise BackendError(f"metadata insert failed: {e}") from e

        logger.info("Stored '%s' (%s, %d bytes) as %s", file.name, mime, len(file.bytes), key)
        return key

    def _discard_blob(self, file_id: ObjectId) -> None:
        # Best effort: a failure here leaves an orphaned blob behind.
        try:
            self.bucket.delete(file_id)
            logger.info("Removed blob %s after failed metadata insert", file_id)
        except PyMongoError as e:
            logger.warning("Could not remove orphaned blob %s: %s", file_id, e)

    def get(self, key: str) -> Iterator[bytes]:
        file_id = parse_key(key)
        try:
            grid_out = self.bucket.open_download_stream(file_id)
        except NoFile:
            raise NotFoundError(key)
        except PyMongoError as e:
            raise BackendError(f"blob download failed: {e}") from e
        return GridOutChunks(grid_out)

    def info(self, key: str) -> Optional[FileMetadata]:
        canonical_key = str(parse_key(key))
        try:
            document = self.collection.find_one({"key": canonical_key}, {"_id": 0})
        except PyMongoError as e:
            raise BackendError(f"metadata lookup failed: {e}") from e
        if document is None:
            return None
        try:
            return FileMetadata.model_validate(document)
        except pydantic.ValidationError as e:
            logger.error("Metadata record for %s is malformed: %s", canonical_key, e)
            raise BackendError(f"malformed metadata record for {canonical_key}") from e

    def ping(self) -> bool:
        if self.client is None:
            return True
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False

    def init_indexes(self) -> None:
        try:
            self.collection.create_index([("key", ASCENDING)], unique=True)
        except PyMongoError as e:
            raise BackendError(f"index creation failed: {e}") from e
        logger.info("Ensured unique index on '%s.key'", self.collection.name)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
