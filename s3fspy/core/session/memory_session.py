"""Cursor storage that lives only as long as the process."""
from typing import Optional

from .protocols import SessionStorage
from .models import SessionData


class MemorySession(SessionStorage):
    """
    Keeps the saved cursor in an attribute.

    Useful in tests and for embedding S3FileSystem where nothing should be
    written to disk.

    Example:
        >>> session = MemorySession()
        >>> session.save(SessionData(current_folder="s3://bucket/"))
        >>> session.load().current_folder
        's3://bucket/'
    """

    def __init__(self):
        self._data: Optional[SessionData] = None

    def load(self) -> Optional[SessionData]:
        return self._data

    def save(self, data: SessionData) -> None:
        data.update_timestamp()
        self._data = data

    def delete(self) -> None:
        self._data = None

    def exists(self) -> bool:
        return self._data is not None

    def close(self) -> None:
        pass

    def __enter__(self) -> 'MemorySession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
