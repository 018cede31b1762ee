import logging
from typing import Iterator, Optional

from files_store.config.settings import Settings, get_settings
from files_store.schemas import FileInput, FileMetadata

logger = logging.getLogger(__name__)


class BaseStore:
    """
    Base class for file stores (to be extended by specific implementations).

    A store persists the bytes of a file together with a metadata record and
    hands both back by key. Implementations must be safe to share between
    concurrent requests.
    """

    def put(self, file: FileInput) -> str:
        """Persist ``file`` and return the newly assigned key."""
        raise NotImplementedError

    def get(self, key: str) -> Iterator[bytes]:
        """Return the stored content of ``key`` as a one-shot iterator of chunks.

        Iterators that hold backend resources expose ``close()``; callers that
        may stop early must call it.
        """
        raise NotImplementedError

    def info(self, key: str) -> Optional[FileMetadata]:
        """Return the metadata record for ``key``, or None when there is none."""
        raise NotImplementedError

    def ping(self) -> bool:
        """Report whether the backend is reachable."""
        return True

    def init_indexes(self) -> None:
        """Create whatever indexes the backend relies on. No-op by default."""

    def close(self) -> None:
        """Release backend resources."""


class StoreFactory:
    """Builds the store configured for this process."""

    @staticmethod
    def get_store(settings: Optional[Settings] = None) -> BaseStore:
        settings = settings or get_settings()
        # imported here so the abstraction does not drag pymongo into every import
        from files_store.adapters.mongo import MongoStore

        logger.info("Creating MongoStore for database '%s'", settings.database_name)
        return MongoStore.from_settings(settings)
