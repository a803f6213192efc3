"""
SQLite session storage implementation.

Keeps the saved cursor in a small ``.session`` database so it survives
between processes.
"""
import sqlite3
import threading
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

from .protocols import SessionStorage
from .models import SessionData

SCHEMA = '''
    CREATE TABLE IF NOT EXISTS cursor (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        current_folder TEXT,
        endpoint_url TEXT,
        region TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
'''

COLUMNS = ('current_folder', 'endpoint_url', 'region', 'created_at', 'updated_at')


class SQLiteSession(SessionStorage):
    """
    Cursor storage in a SQLite file.

    The database holds at most one row. ``save`` upserts it, ``delete``
    removes it and leaves the file in place.

    Example:
        >>> with SQLiteSession("work", Path("~/.config/s3fs").expanduser()) as session:
        ...     session.save(SessionData(current_folder="s3://bucket/reports/"))
        ...     session.load().folder
        S3Folder(bucket='bucket', path='reports/')
    """

    EXTENSION = '.session'
    SCHEMA_VERSION = 2

    def __init__(
        self,
        session_name: Union[str, Path],
        base_path: Optional[Path] = None
    ):
        """
        Open (and create if needed) the session database.

        Args:
            session_name: Name without extension, or a path ending in ``.session``
            base_path: Directory for named sessions (current directory if omitted)
        """
        name = str(session_name)
        if isinstance(session_name, Path) or name.endswith(self.EXTENSION):
            path = Path(session_name)
        else:
            path = (base_path or Path()) / f"{name}{self.EXTENSION}"

        path.parent.mkdir(parents=True, exist_ok=True)
        self._path = path
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None
        self._migrate()

    @property
    def path(self) -> Path:
        return self._path

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _migrate(self) -> None:
        with self._lock:
            conn = self._connection()
            version = conn.execute('PRAGMA user_version').fetchone()[0]
            if version < self.SCHEMA_VERSION:
                with conn:
                    conn.execute(SCHEMA)
                    conn.execute(f'PRAGMA user_version = {self.SCHEMA_VERSION}')

    def load(self) -> Optional[SessionData]:
        with self._lock:
            row = self._connection().execute(
                f'SELECT {", ".join(COLUMNS)} FROM cursor WHERE id = 1'
            ).fetchone()

        if row is None:
            return None
        return SessionData(
            current_folder=row['current_folder'],
            endpoint_url=row['endpoint_url'],
            region=row['region'],
            created_at=datetime.fromisoformat(row['created_at']),
            updated_at=datetime.fromisoformat(row['updated_at']),
        )

    def save(self, data: SessionData) -> None:
        """Replace the stored cursor with ``data``."""
        data.update_timestamp()
        values = (
            data.current_folder,
            data.endpoint_url,
            data.region,
            data.created_at.isoformat(),
            data.updated_at.isoformat(),
        )
        with self._lock:
            conn = self._connection()
            with conn:
                conn.execute(
                    f'INSERT OR REPLACE INTO cursor (id, {", ".join(COLUMNS)}) VALUES (1, ?, ?, ?, ?, ?)',
                    values
                )

    def delete(self) -> None:
        with self._lock:
            conn = self._connection()
            with conn:
                conn.execute('DELETE FROM cursor')

    def exists(self) -> bool:
        with self._lock:
            row = self._connection().execute('SELECT 1 FROM cursor WHERE id = 1').fetchone()
        return row is not None

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def delete_file(self) -> None:
        """Close the database and remove its file."""
        self.close()
        self._path.unlink(missing_ok=True)

    def __enter__(self) -> 'SQLiteSession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
