"""Pytest fixtures for s3fspy tests."""
import hashlib
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl

import pytest
from botocore.exceptions import ClientError

from s3fspy import S3FileSystem, S3Folder, NavigationState

BUCKET_NAME_PATTERN = re.compile(r'^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$')


def client_error(code: str, operation: str, status: int = 400, message: str = '') -> ClientError:
    """Build a botocore ClientError the way the service returns it."""
    return ClientError(
        {
            'Error': {'Code': code, 'Message': message or code},
            'ResponseMetadata': {'HTTPStatusCode': status},
        },
        operation
    )


class InMemoryS3Client:
    """
    In-memory S3ClientProtocol implementation.

    Listings are split into pages of ``page_size`` entries so that the
    continuation logic gets exercised.
    """

    def __init__(self, page_size: int = 2):
        self.page_size = page_size
        self.buckets: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.list_calls: List[Dict[str, Any]] = []
        self.page_requests = 0
        self.sign_calls: List[tuple] = []
        self.omit_body = False
        self.closed = False

    def _bucket(self, bucket: str, operation: str) -> Dict[str, Dict[str, Any]]:
        if bucket not in self.buckets:
            raise client_error('NoSuchBucket', operation, 404)
        return self.buckets[bucket]

    def _object(self, bucket: str, key: str, operation: str, code: str = 'NoSuchKey') -> Dict[str, Any]:
        objects = self._bucket(bucket, operation)
        if key not in objects:
            raise client_error(code, operation, 404)
        return objects[key]

    async def get_object(self, bucket: str, key: str) -> Dict[str, Any]:
        obj = self._object(bucket, key, 'GetObject')
        response = {
            'ContentLength': len(obj['body']),
            'ContentType': obj['content_type'],
            'ETag': obj['etag'],
        }
        if not self.omit_body:
            response['Body'] = obj['body']
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
        objects = self._bucket(bucket, 'PutObject')
        etag = f'"{hashlib.md5(body).hexdigest()}"'
        objects[key] = {
            'body': bytes(body),
            'acl': acl,
            'content_encoding': content_encoding,
            'content_type': content_type or 'binary/octet-stream',
            'tags': dict(parse_qsl(tagging)) if tagging else {},
            'etag': etag,
            'last_modified': datetime.now(timezone.utc),
        }
        return {'ETag': etag}

    async def delete_object(self, bucket: str, key: str) -> Dict[str, Any]:
        self._bucket(bucket, 'DeleteObject').pop(key, None)
        return {}

    async def copy_object(self, bucket: str, key: str, source_bucket: str, source_key: str) -> Dict[str, Any]:
        source = self._object(source_bucket, source_key, 'CopyObject')
        self._bucket(bucket, 'CopyObject')[key] = dict(source, last_modified=datetime.now(timezone.utc))
        return {'CopyObjectResult': {'ETag': source['etag']}}

    async def head_object(self, bucket: str, key: str) -> Dict[str, Any]:
        obj = self._object(bucket, key, 'HeadObject', code='404')
        response = {
            'ContentLength': len(obj['body']),
            'ContentType': obj['content_type'],
            'ETag': obj['etag'],
            'LastModified': obj['last_modified'],
        }
        if obj['content_encoding']:
            response['ContentEncoding'] = obj['content_encoding']
        return response

    async def head_bucket(self, bucket: str) -> Dict[str, Any]:
        if bucket not in self.buckets:
            raise client_error('404', 'HeadBucket', 404, 'Not Found')
        return {}

    async def create_bucket(self, bucket: str, acl: Optional[str] = None) -> Dict[str, Any]:
        if not BUCKET_NAME_PATTERN.match(bucket):
            raise client_error('InvalidBucketName', 'CreateBucket')
        if bucket in self.buckets:
            raise client_error('BucketAlreadyOwnedByYou', 'CreateBucket', 409)
        self.buckets[bucket] = {}
        return {'Location': f'/{bucket}'}

    async def delete_bucket(self, bucket: str) -> Dict[str, Any]:
        if self._bucket(bucket, 'DeleteBucket'):
            raise client_error('BucketNotEmpty', 'DeleteBucket', 409)
        del self.buckets[bucket]
        return {}

    async def list_objects_v2(self, bucket: str, prefix: str = '', delimiter: Optional[str] = None):
        self.list_calls.append({'bucket': bucket, 'prefix': prefix, 'delimiter': delimiter})
        objects = self._bucket(bucket, 'ListObjectsV2')

        entries = []
        prefixes = set()
        for key in sorted(objects):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                prefixes.add(prefix + rest[:rest.index(delimiter) + 1])
                continue
            obj = objects[key]
            entries.append(('key', key, {
                'Key': key,
                'ETag': obj['etag'],
                'Size': len(obj['body']),
                'LastModified': obj['last_modified'],
            }))
        entries.extend(('prefix', p, {'Prefix': p}) for p in prefixes)
        entries.sort(key=lambda e: e[1])

        for start in range(0, max(len(entries), 1), self.page_size):
            self.page_requests += 1
            chunk = entries[start:start + self.page_size]
            truncated = start + self.page_size < len(entries)
            page: Dict[str, Any] = {
                'KeyCount': len(chunk),
                'IsTruncated': truncated,
                'Prefix': prefix,
            }
            contents = [e[2] for e in chunk if e[0] == 'key']
            common = [e[2] for e in chunk if e[0] == 'prefix']
            if contents:
                page['Contents'] = contents
            if common:
                page['CommonPrefixes'] = common
            if truncated:
                page['NextContinuationToken'] = f'token-{start + self.page_size}'
            yield page

    async def list_buckets(self) -> Dict[str, Any]:
        return {'Buckets': [{'Name': name} for name in sorted(self.buckets)]}

    async def get_object_tagging(self, bucket: str, key: str) -> Dict[str, Any]:
        obj = self._object(bucket, key, 'GetObjectTagging')
        return {'TagSet': [{'Key': k, 'Value': v} for k, v in obj['tags'].items()]}

    async def put_object_tagging(self, bucket: str, key: str, tags: Dict[str, str]) -> Dict[str, Any]:
        self._object(bucket, key, 'PutObjectTagging')['tags'] = dict(tags)
        return {}

    async def put_object_acl(self, bucket: str, key: str, acl: str) -> Dict[str, Any]:
        self._object(bucket, key, 'PutObjectAcl')['acl'] = acl
        return {}

    async def sign_url(self, method: str, bucket: str, key: str, expires: int) -> str:
        self.sign_calls.append((method, bucket, key, expires))
        return f'https://{bucket}.s3.amazonaws.com/{key}?X-Amz-Expires={expires}&X-Amz-Signature=fake'

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def s3_client():
    """Empty in-memory S3 client."""
    return InMemoryS3Client()


@pytest.fixture
def bucket_name():
    return 's3fs-test-bucket'


@pytest.fixture
def s3_bucket(s3_client, bucket_name):
    """In-memory S3 client with one empty bucket."""
    s3_client.buckets[bucket_name] = {}
    return s3_client


@pytest.fixture
def s3fs(s3_client):
    """Filesystem with no current folder."""
    return S3FileSystem(s3_client)


@pytest.fixture
def bucket_fs(s3_bucket, bucket_name):
    """Filesystem positioned at the root of the test bucket."""
    return S3FileSystem(s3_bucket, navigation=NavigationState(S3Folder(bucket_name)))
