"""
Async S3 client.

Thin aiobotocore wrapper implementing S3ClientProtocol.
"""
import asyncio
from contextlib import AsyncExitStack
from typing import Dict, Optional, Any, AsyncIterator

from aiobotocore.session import get_session

from .config import S3Config
from ..logging import get_logger

SIGNED_OPERATIONS = {
    'GET': 'get_object',
    'PUT': 'put_object',
}


class AsyncS3Client:
    """
    Asynchronous S3 client.

    Features:
    - Lazy client creation on first request
    - Paginated listing as an async iterator
    - Presigned GET/PUT URLs

    Example:
        >>> config = S3Config.from_env()
        >>> async with AsyncS3Client(config) as client:
        ...     await client.head_bucket('my-bucket')
    """

    def __init__(self, config: Optional[S3Config] = None):
        """
        Initialize async S3 client.

        Args:
            config: Client configuration (uses defaults if not provided)
        """
        self._config = config or S3Config.default()
        self._exit_stack: Optional[AsyncExitStack] = None
        self._client = None
        self._client_lock = asyncio.Lock()
        self._logger = get_logger('s3fspy.api')

    @property
    def config(self) -> S3Config:
        """Get current configuration."""
        return self._config

    async def __aenter__(self) -> 'AsyncS3Client':
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self):
        """Ensure the aiobotocore client is created and open."""
        if self._client is not None:
            return self._client
        async with self._client_lock:
            if self._client is None:
                exit_stack = AsyncExitStack()
                session = get_session()
                self._client = await exit_stack.enter_async_context(
                    session.create_client('s3', **self._config.get_client_kwargs())
                )
                self._exit_stack = exit_stack
                self._logger.debug(
                    f"S3 client created (region={self._config.region}, endpoint={self._config.endpoint_url})"
                )
        return self._client

    async def close(self):
        """Close client and release resources."""
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
        self._exit_stack = None
        self._client = None

    # =========================================================================
    # Objects
    # =========================================================================

    async def get_object(self, bucket: str, key: str) -> Dict[str, Any]:
        client = await self._ensure_client()
        response = await client.get_object(Bucket=bucket, Key=key)
        stream = response.get('Body')
        if stream is not None:
            async with stream as body:
                response['Body'] = await body.read()
        return response

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
        client = await self._ensure_client()
        params: Dict[str, Any] = {'Bucket': bucket, 'Key': key, 'Body': body}
        if acl:
            params['ACL'] = acl
        if content_encoding:
            params['ContentEncoding'] = content_encoding
        if content_type:
            params['ContentType'] = content_type
        if tagging:
            params['Tagging'] = tagging
        self._logger.debug(f"PUT s3://{bucket}/{key} ({len(body)} bytes)")
        return await client.put_object(**params)

    async def delete_object(self, bucket: str, key: str) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.delete_object(Bucket=bucket, Key=key)

    async def copy_object(
        self,
        bucket: str,
        key: str,
        source_bucket: str,
        source_key: str
    ) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.copy_object(
            Bucket=bucket,
            Key=key,
            CopySource={'Bucket': source_bucket, 'Key': source_key},
        )

    async def head_object(self, bucket: str, key: str) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.head_object(Bucket=bucket, Key=key)

    async def get_object_tagging(self, bucket: str, key: str) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.get_object_tagging(Bucket=bucket, Key=key)

    async def put_object_tagging(self, bucket: str, key: str, tags: Dict[str, str]) -> Dict[str, Any]:
        client = await self._ensure_client()
        tag_set = [{'Key': k, 'Value': v} for k, v in tags.items()]
        return await client.put_object_tagging(Bucket=bucket, Key=key, Tagging={'TagSet': tag_set})

    async def put_object_acl(self, bucket: str, key: str, acl: str) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.put_object_acl(Bucket=bucket, Key=key, ACL=acl)

    async def list_objects_v2(
        self,
        bucket: str,
        prefix: str = '',
        delimiter: Optional[str] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        client = await self._ensure_client()
        params: Dict[str, Any] = {'Bucket': bucket, 'Prefix': prefix}
        if delimiter is not None:
            params['Delimiter'] = delimiter
        paginator = client.get_paginator('list_objects_v2')
        async for page in paginator.paginate(**params):
            yield page

    async def sign_url(self, method: str, bucket: str, key: str, expires: int) -> str:
        """
        Presign a request for an object.

        Args:
            method: 'GET' or 'PUT'
            bucket: Bucket name
            key: Object key
            expires: Lifetime of the URL in seconds

        Returns:
            Signed URL
        """
        operation = SIGNED_OPERATIONS.get(method.upper())
        if operation is None:
            raise ValueError(f"Cannot sign {method} requests")
        client = await self._ensure_client()
        return await client.generate_presigned_url(
            operation,
            Params={'Bucket': bucket, 'Key': key},
            ExpiresIn=expires,
        )

    # =========================================================================
    # Buckets
    # =========================================================================

    async def head_bucket(self, bucket: str) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.head_bucket(Bucket=bucket)

    async def create_bucket(self, bucket: str, acl: Optional[str] = None) -> Dict[str, Any]:
        client = await self._ensure_client()
        params: Dict[str, Any] = {'Bucket': bucket}
        if acl:
            params['ACL'] = acl
        # us-east-1 rejects an explicit location constraint
        if self._config.region and self._config.region != 'us-east-1':
            params['CreateBucketConfiguration'] = {'LocationConstraint': self._config.region}
        return await client.create_bucket(**params)

    async def delete_bucket(self, bucket: str) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.delete_bucket(Bucket=bucket)

    async def list_buckets(self) -> Dict[str, Any]:
        client = await self._ensure_client()
        return await client.list_buckets()
