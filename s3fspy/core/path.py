"""
S3 path values.

Immutable folder and file addresses inside a bucket, with parsing from and
formatting to ``s3://bucket/key`` URLs.

Usage:
    >>> folder = S3Folder.from_url("s3://my-bucket/photos")
    >>> folder.path
    'photos/'
    >>> folder.file("cat.png").url
    's3://my-bucket/photos/cat.png'
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple, Type, TypeVar

SCHEME = 's3'

P = TypeVar('P', bound='S3Path')


def split_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Split an ``s3://`` URL into bucket and key.

    Args:
        url: URL string

    Returns:
        (bucket, key) tuple, or None if the URL is not an s3 URL
    """
    scheme, sep, rest = url.partition('://')
    if not sep or scheme.lower() != SCHEME:
        return None

    bucket, _, key = rest.partition('/')
    if not bucket:
        return None
    return bucket, key


@dataclass(frozen=True)
class S3Path(ABC):
    """Base class for addresses inside a bucket."""
    bucket: str
    path: str = ''

    def __post_init__(self):
        if not self.bucket or '/' in self.bucket:
            raise ValueError(f"Invalid bucket name: {self.bucket!r}")
        object.__setattr__(self, 'path', self._normalize(self.path.lstrip('/')))

    @staticmethod
    @abstractmethod
    def _normalize(path: str) -> str:
        """Canonical form of a path with leading slashes removed."""

    @property
    def key(self) -> str:
        """Object key in the bucket."""
        return self.path

    @property
    def url(self) -> str:
        return f"{SCHEME}://{self.bucket}/{self.path}"

    @classmethod
    def from_url(cls: Type[P], url: str) -> Optional[P]:
        """
        Parse an ``s3://`` URL.

        Returns None when the URL does not describe this kind of path.
        """
        parts = split_url(url)
        if parts is None:
            return None
        try:
            return cls(*parts)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class S3Folder(S3Path):
    """
    Folder inside a bucket.

    ``path`` is empty (bucket root) or ends with ``/``.
    """

    @staticmethod
    def _normalize(path: str) -> str:
        if path and not path.endswith('/'):
            path += '/'
        return path

    @property
    def is_root(self) -> bool:
        return self.path == ''

    @property
    def name(self) -> str:
        """Last path segment, empty at the bucket root."""
        return self.path.rstrip('/').rpartition('/')[2]

    def sub_folder(self, name: str) -> 'S3Folder':
        """Folder ``name`` below this one."""
        name = name.strip('/')
        if not name:
            raise ValueError("Folder name cannot be empty")
        return S3Folder(self.bucket, self.path + name)

    def parent(self) -> Optional['S3Folder']:
        """Folder one level up, or None at the bucket root."""
        if self.is_root:
            return None
        head, _, _ = self.path.rstrip('/').rpartition('/')
        return S3Folder(self.bucket, head)

    def file(self, name: str) -> 'S3File':
        """File ``name`` inside this folder."""
        return S3File(self.bucket, self.path + name.lstrip('/'))


@dataclass(frozen=True)
class S3File(S3Path):
    """
    File inside a bucket.

    ``path`` is never empty and never ends with ``/``.
    """

    @staticmethod
    def _normalize(path: str) -> str:
        return path

    def __post_init__(self):
        super().__post_init__()
        if not self.path or self.path.endswith('/'):
            raise ValueError(f"Invalid file path: {self.path!r}")

    @property
    def name(self) -> str:
        return self.path.rpartition('/')[2]

    @property
    def name_without_extension(self) -> str:
        head, sep, _ = self.name.rpartition('.')
        return head if sep else self.name

    @property
    def extension(self) -> str:
        _, sep, tail = self.name.rpartition('.')
        return tail if sep else ''

    @property
    def folder(self) -> S3Folder:
        """Folder containing this file."""
        return S3Folder(self.bucket, self.path.rpartition('/')[0])
