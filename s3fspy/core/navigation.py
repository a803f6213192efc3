"""
Current-folder cursor.

``NavigationState`` is the session's working directory. It only moves the
cursor; bucket verification on absolute moves is done by ``S3FileSystem``
before it calls :meth:`NavigationState.set`.

The cursor has a single writer. Pushing and popping from concurrent tasks
against the same state is a race with an undefined result.
"""
from typing import Optional

from .exceptions import InvalidAction, InvalidInput
from .logging import get_logger
from .path import S3Folder, S3File

logger = get_logger('s3fspy.navigation')


class NavigationState:
    """
    Mutable "present working directory" for an S3FileSystem.

    Example:
        >>> state = NavigationState(S3Folder('bucket'))
        >>> state.push('photos')
        >>> state.current_folder.url
        's3://bucket/photos/'
        >>> state.pop()
        >>> state.current_folder.url
        's3://bucket/'
    """

    def __init__(self, current_folder: Optional[S3Folder] = None):
        self._current_folder = current_folder

    def __repr__(self) -> str:
        return f"NavigationState({self._current_folder!r})"

    @property
    def current_folder(self) -> Optional[S3Folder]:
        return self._current_folder

    def require(self) -> S3Folder:
        """
        Get the current folder.

        Raises:
            InvalidAction: If no folder is selected
        """
        if self._current_folder is None:
            raise InvalidAction("No current folder set")
        return self._current_folder

    def set(self, folder: S3Folder) -> None:
        """Replace the cursor. The caller has verified the bucket."""
        logger.debug(f"Current folder: {folder.url}")
        self._current_folder = folder

    def set_path(self, path: str) -> None:
        """
        Move to ``path`` (from the bucket root) within the current bucket.

        No existence check is made.
        """
        current = self.require()
        self.set(S3Folder(current.bucket, path))

    def push(self, name: str) -> None:
        """
        Enter subfolder ``name`` of the current folder.

        ``name`` is a single segment, so :meth:`pop` undoes it exactly.
        Use :meth:`set_path` to move several levels at once.
        """
        current = self.require()
        if "/" in name.strip("/"):
            raise InvalidInput(f"Folder name must be a single segment: {name!r}")
        try:
            folder = current.sub_folder(name)
        except ValueError as e:
            raise InvalidInput(str(e)) from e
        self.set(folder)

    def pop(self) -> None:
        """Go up one folder level. Fails at the bucket root."""
        parent = self.require().parent()
        if parent is None:
            raise InvalidAction("Already at bucket root")
        self.set(parent)

    def file(self, name: str) -> S3File:
        """Resolve ``name`` against the current folder."""
        current = self.require()
        try:
            return current.file(name)
        except ValueError as e:
            raise InvalidInput(str(e)) from e

    def forget_bucket(self, bucket: str) -> None:
        """Clear the cursor if it points into ``bucket``."""
        if self._current_folder is not None and self._current_folder.bucket == bucket:
            logger.debug(f"Clearing current folder in bucket {bucket}")
            self._current_folder = None

    def clear(self) -> None:
        self._current_folder = None
