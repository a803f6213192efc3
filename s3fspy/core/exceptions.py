"""
Exceptions raised by s3fspy.

Every failure coming back from the S3 client is translated once into one of
the classes below. Callers only ever see these types.
"""
from typing import Optional

from botocore.exceptions import ClientError, ParamValidationError, ValidationError

from .logging import get_logger

logger = get_logger('s3fspy.errors')


class S3FileSystemError(Exception):
    """Base exception for all s3fspy errors."""

    code = 's3fs_error'

    def __init__(self, message: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message (defaults to the error code)
        """
        super().__init__(message or self.code)


class InvalidAction(S3FileSystemError):
    """Operation attempted without its preconditions (e.g. no current folder)."""
    code = 'invalid_action'


class InvalidInput(S3FileSystemError):
    """Input rejected by validation (bad bucket name, bad path)."""
    code = 'invalid_input'


class AccessDenied(S3FileSystemError):
    """Storage failure that is not otherwise classified."""
    code = 'access_denied'


class BucketDoesNotExist(S3FileSystemError):
    """Bucket is missing."""
    code = 'bucket_does_not_exist'


class FileDoesNotExist(S3FileSystemError):
    """Object key is missing."""
    code = 'file_does_not_exist'


class InvalidURL(S3FileSystemError):
    """Signed URL could not be built."""
    code = 'invalid_url'


class Unexpected(S3FileSystemError):
    """Successful response without the expected payload."""
    code = 'unexpected'


MISSING_BUCKET_CODES = frozenset({'NoSuchBucket'})
MISSING_KEY_CODES = frozenset({'NoSuchKey', 'NotFound', '404'})
INVALID_INPUT_CODES = frozenset({'InvalidBucketName'})


def error_code(error: ClientError) -> str:
    """Gets the S3 error code from a botocore ClientError."""
    return str(error.response.get('Error', {}).get('Code', ''))


def convert_s3_error(error: Exception) -> S3FileSystemError:
    """
    Translate an S3 client error into an s3fspy error.

    Args:
        error: Exception raised by the S3 client

    Returns:
        Matching S3FileSystemError instance
    """
    if isinstance(error, S3FileSystemError):
        return error

    if isinstance(error, (ParamValidationError, ValidationError)):
        return InvalidInput(str(error))

    if isinstance(error, ClientError):
        code = error_code(error)
        if code in MISSING_BUCKET_CODES:
            return BucketDoesNotExist(str(error))
        if code in MISSING_KEY_CODES:
            return FileDoesNotExist(str(error))
        if code in INVALID_INPUT_CODES:
            return InvalidInput(str(error))

    logger.warning("Unclassified S3 error: %r", error)
    return AccessDenied(str(error))
