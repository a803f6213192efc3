"""Attribute records returned by and passed to S3FileSystem."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any
from urllib.parse import urlencode

from .path import S3File


@dataclass
class CreateBucketAttributes:
    """
    Options applied when a bucket is created.

    Attributes:
        acl: Canned ACL ('private', 'public-read', 'public-read-write',
            'authenticated-read')
    """
    acl: Optional[str] = None


@dataclass
class WriteFileAttributes:
    """
    Options applied when a file is written.

    Attributes:
        acl: Canned object ACL
        content_encoding: Content encodings applied to the object
        content_type: MIME type of the contents
        tags: Object tag set
    """
    acl: Optional[str] = None
    content_encoding: Optional[str] = None
    content_type: Optional[str] = None
    tags: Optional[Dict[str, str]] = None

    @property
    def tagging(self) -> Optional[str]:
        """Tags encoded the way PutObject expects them."""
        if not self.tags:
            return None
        return urlencode(self.tags)


@dataclass
class FileAttributes:
    """Attributes of an uploaded file, as reported by HEAD."""
    e_tag: Optional[str] = None
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    content_encoding: Optional[str] = None
    content_type: Optional[str] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> 'FileAttributes':
        return cls(
            e_tag=response.get('ETag'),
            size=response.get('ContentLength'),
            last_modified=response.get('LastModified'),
            content_encoding=response.get('ContentEncoding'),
            content_type=response.get('ContentType'),
        )


@dataclass
class FileListAttributes:
    """
    File entry returned by a listing.

    Attributes:
        file: File address (full key)
        e_tag: Opaque entity tag
        size: Size in bytes
        last_modified: Last modification time
        relative_path: Key relative to the listed folder
    """
    file: S3File
    e_tag: Optional[str] = None
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    relative_path: str = ''

    @property
    def name(self) -> str:
        return self.file.name
