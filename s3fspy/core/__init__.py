"""Core building blocks: paths, navigation, listing, errors."""
from .path import S3Path, S3Folder, S3File
from .navigation import NavigationState
from .models import (
    CreateBucketAttributes,
    WriteFileAttributes,
    FileAttributes,
    FileListAttributes
)
from .exceptions import (
    S3FileSystemError,
    InvalidAction,
    InvalidInput,
    AccessDenied,
    BucketDoesNotExist,
    FileDoesNotExist,
    InvalidURL,
    Unexpected,
    convert_s3_error
)

__all__ = [
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
    'convert_s3_error',
]
