"""
S3 client protocol.

The operations s3fspy needs from an object store. ``AsyncS3Client`` is the
aiobotocore implementation; anything with the same coroutines can be
injected into ``S3FileSystem``.

Responses are dictionaries using botocore field names. Errors are raised as
botocore exceptions.
"""
from typing import Protocol, Optional, Dict, Any, AsyncIterator, runtime_checkable


@runtime_checkable
class S3ClientProtocol(Protocol):
    """Asynchronous object-store operations used by S3FileSystem."""

    async def get_object(self, bucket: str, key: str) -> Dict[str, Any]:
        """Get an object. ``Body`` holds the contents as bytes."""
        ...

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        acl: Optional[str] = None,
        content_encoding: Optional[str] = None,
        content_type: Optional[str] = None,
        tagging: Optional[str] = None
    ) -> Dict[str, Any]:
        ...

    async def delete_object(self, bucket: str, key: str) -> Dict[str, Any]:
        ...

    async def copy_object(
        self,
        bucket: str,
        key: str,
        source_bucket: str,
        source_key: str
    ) -> Dict[str, Any]:
        ...

    async def head_object(self, bucket: str, key: str) -> Dict[str, Any]:
        ...

    async def head_bucket(self, bucket: str) -> Dict[str, Any]:
        ...

    async def create_bucket(self, bucket: str, acl: Optional[str] = None) -> Dict[str, Any]:
        ...

    async def delete_bucket(self, bucket: str) -> Dict[str, Any]:
        ...

    def list_objects_v2(
        self,
        bucket: str,
        prefix: str = '',
        delimiter: Optional[str] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """Iterate over listing pages, following continuation tokens."""
        ...

    async def list_buckets(self) -> Dict[str, Any]:
        ...

    async def get_object_tagging(self, bucket: str, key: str) -> Dict[str, Any]:
        ...

    async def put_object_tagging(self, bucket: str, key: str, tags: Dict[str, str]) -> Dict[str, Any]:
        ...

    async def put_object_acl(self, bucket: str, key: str, acl: str) -> Dict[str, Any]:
        ...

    async def sign_url(self, method: str, bucket: str, key: str, expires: int) -> str:
        """Presign a GET or PUT request for an object."""
        ...

    async def close(self) -> None:
        ...
