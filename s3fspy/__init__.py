"""
s3fspy - Async folder/file view of S3 object storage.

Usage:
    >>> from s3fspy import S3FileSystem, S3Config
    >>>
    >>> async with S3FileSystem(config=S3Config.from_env()) as fs:
    ...     await fs.set_current_folder("s3://my-bucket")
    ...     fs.push_folder("reports")
    ...     for entry in await fs.list_files():
    ...         print(entry.file.url)
"""
import logging
from .client import S3FileSystem

from .core.path import S3Path, S3Folder, S3File
from .core.navigation import NavigationState
from .core.models import (
    CreateBucketAttributes,
    WriteFileAttributes,
    FileAttributes,
    FileListAttributes
)

# Errors
from .core.exceptions import (
    S3FileSystemError,
    InvalidAction,
    InvalidInput,
    AccessDenied,
    BucketDoesNotExist,
    FileDoesNotExist,
    InvalidURL,
    Unexpected
)

# Configuration
from .core.api import (
    S3Config,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    AsyncS3Client,
    S3ClientProtocol
)

# Session management
from .core.session import (
    SessionStorage,
    SessionData,
    SQLiteSession,
    MemorySession
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for s3fspy modules.

    Sets the level of every s3fspy logger and makes sure they propagate
    to the root logger.

    Args:
        level: Logging level (default: logging.INFO)
    """
    from .core.logging import set_level
    set_level(level)


__all__ = [
    'S3FileSystem',
    'S3Path',
    'S3Folder',
    'S3File',
    'NavigationState',
    'CreateBucketAttributes',
    'WriteFileAttributes',
    'FileAttributes',
    'FileListAttributes',
    'S3FileSystemError',
    'InvalidAction',
    'InvalidInput',
    'AccessDenied',
    'BucketDoesNotExist',
    'FileDoesNotExist',
    'InvalidURL',
    'Unexpected',
    'S3Config',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'AsyncS3Client',
    'S3ClientProtocol',
    'SessionStorage',
    'SessionData',
    'SQLiteSession',
    'MemorySession',
    'setup_logging',
]
