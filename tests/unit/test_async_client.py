"""Tests for the aiobotocore-backed client."""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from s3fspy.core.api import AsyncS3Client, S3ClientProtocol, S3Config


class FakeBody:
    """Streaming body as returned by aiobotocore."""

    def __init__(self, data: bytes):
        self.data = data

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def read(self) -> bytes:
        return self.data


class FakeClientContext:
    """Async context manager returned by ``session.create_client``."""

    def __init__(self, client):
        self.client = client
        self.exited = False

    async def __aenter__(self):
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.exited = True
        return False


class FakePaginator:
    def __init__(self, pages):
        self.pages = pages
        self.params = None

    async def _iterate(self):
        for page in self.pages:
            yield page

    def paginate(self, **params):
        self.params = params
        return self._iterate()


@pytest.fixture
def botocore_client():
    """Mocked aiobotocore S3 client."""
    client = MagicMock()
    for name in (
        'get_object', 'put_object', 'delete_object', 'copy_object', 'head_object',
        'head_bucket', 'create_bucket', 'delete_bucket', 'list_buckets',
        'get_object_tagging', 'put_object_tagging', 'put_object_acl',
        'generate_presigned_url',
    ):
        setattr(client, name, AsyncMock(return_value={}))
    return client


@pytest.fixture
def session(botocore_client):
    """Patched aiobotocore session."""
    with patch('s3fspy.core.api.async_client.get_session') as get_session:
        context = FakeClientContext(botocore_client)
        get_session.return_value.create_client.return_value = context
        yield get_session.return_value


class TestAsyncS3Client:
    """Test suite for AsyncS3Client."""

    def test_implements_protocol(self):
        """Test the client satisfies S3ClientProtocol."""
        assert isinstance(AsyncS3Client(), S3ClientProtocol)

    @pytest.mark.asyncio
    async def test_lazy_client_creation(self, session):
        """Test the botocore client is created once, on first use."""
        client = AsyncS3Client(S3Config.with_endpoint("http://localhost:9000"))

        session.create_client.assert_not_called()

        await client.head_bucket('bucket')
        await client.head_bucket('bucket')

        session.create_client.assert_called_once()
        args, kwargs = session.create_client.call_args
        assert args == ('s3',)
        assert kwargs['endpoint_url'] == "http://localhost:9000"

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_client(self, session):
        """Test concurrent first requests create and close a single botocore client."""
        contexts = []

        class SlowClientContext(FakeClientContext):
            async def __aenter__(self):
                await asyncio.sleep(0)
                return self.client

        def create_client(*args, **kwargs):
            context = SlowClientContext(MagicMock(head_bucket=AsyncMock(return_value={})))
            contexts.append(context)
            return context

        session.create_client.side_effect = create_client

        client = AsyncS3Client()
        await asyncio.gather(*(client.head_bucket('bucket') for _ in range(5)))
        await client.close()

        session.create_client.assert_called_once()
        assert [context.exited for context in contexts] == [True]

    @pytest.mark.asyncio
    async def test_close(self, session):
        """Test close exits the botocore client context."""
        async with AsyncS3Client() as client:
            pass

        assert session.create_client.return_value.exited is True
        assert client._client is None

    @pytest.mark.asyncio
    async def test_get_object_reads_body(self, session, botocore_client):
        """Test the streaming body is read into bytes."""
        botocore_client.get_object.return_value = {'Body': FakeBody(b"payload"), 'ContentLength': 7}

        response = await AsyncS3Client().get_object('bucket', 'key')

        assert response['Body'] == b"payload"
        botocore_client.get_object.assert_awaited_once_with(Bucket='bucket', Key='key')

    @pytest.mark.asyncio
    async def test_get_object_without_body(self, session, botocore_client):
        """Test a response without body is passed through."""
        botocore_client.get_object.return_value = {'ContentLength': 0}

        response = await AsyncS3Client().get_object('bucket', 'key')

        assert 'Body' not in response

    @pytest.mark.asyncio
    async def test_put_object_params(self, session, botocore_client):
        """Test only given attributes are sent."""
        await AsyncS3Client().put_object(
            'bucket', 'a.txt', b"data",
            acl='private', content_type='text/plain', tagging='k=v'
        )

        botocore_client.put_object.assert_awaited_once_with(
            Bucket='bucket', Key='a.txt', Body=b"data",
            ACL='private', ContentType='text/plain', Tagging='k=v'
        )

    @pytest.mark.asyncio
    async def test_copy_object(self, session, botocore_client):
        """Test copy source is sent as a mapping."""
        await AsyncS3Client().copy_object('dst', 'b', source_bucket='src', source_key='a')

        botocore_client.copy_object.assert_awaited_once_with(
            Bucket='dst', Key='b', CopySource={'Bucket': 'src', 'Key': 'a'}
        )

    @pytest.mark.asyncio
    async def test_put_object_tagging(self, session, botocore_client):
        """Test tags are sent as a TagSet."""
        await AsyncS3Client().put_object_tagging('bucket', 'key', {'a': '1'})

        botocore_client.put_object_tagging.assert_awaited_once_with(
            Bucket='bucket', Key='key', Tagging={'TagSet': [{'Key': 'a', 'Value': '1'}]}
        )

    @pytest.mark.asyncio
    async def test_list_objects_pages(self, session, botocore_client):
        """Test listing yields paginator pages in order."""
        paginator = FakePaginator([{'KeyCount': 1}, {'KeyCount': 2}])
        botocore_client.get_paginator.return_value = paginator

        pages = [page async for page in AsyncS3Client().list_objects_v2('bucket', 'docs/', '/')]

        assert pages == [{'KeyCount': 1}, {'KeyCount': 2}]
        botocore_client.get_paginator.assert_called_once_with('list_objects_v2')
        assert paginator.params == {'Bucket': 'bucket', 'Prefix': 'docs/', 'Delimiter': '/'}

    @pytest.mark.asyncio
    async def test_list_objects_recursive(self, session, botocore_client):
        """Test no delimiter is sent for recursive listings."""
        paginator = FakePaginator([])
        botocore_client.get_paginator.return_value = paginator

        assert [page async for page in AsyncS3Client().list_objects_v2('bucket')] == []
        assert paginator.params == {'Bucket': 'bucket', 'Prefix': ''}

    @pytest.mark.asyncio
    async def test_sign_url(self, session, botocore_client):
        """Test GET and PUT map to object operations."""
        botocore_client.generate_presigned_url.return_value = "https://signed"
        client = AsyncS3Client()

        assert await client.sign_url('GET', 'bucket', 'a/b', 60) == "https://signed"
        await client.sign_url('put', 'bucket', 'a/b', 60)

        calls = botocore_client.generate_presigned_url.await_args_list
        assert calls[0].args == ('get_object',)
        assert calls[0].kwargs == {'Params': {'Bucket': 'bucket', 'Key': 'a/b'}, 'ExpiresIn': 60}
        assert calls[1].args == ('put_object',)

    @pytest.mark.asyncio
    async def test_sign_url_unsupported_method(self, session):
        """Test other methods cannot be signed."""
        with pytest.raises(ValueError):
            await AsyncS3Client().sign_url('DELETE', 'bucket', 'key', 60)

    @pytest.mark.asyncio
    async def test_create_bucket_us_east_1(self, session, botocore_client):
        """Test no location constraint in us-east-1."""
        await AsyncS3Client().create_bucket('bucket', acl='private')

        botocore_client.create_bucket.assert_awaited_once_with(Bucket='bucket', ACL='private')

    @pytest.mark.asyncio
    async def test_create_bucket_other_region(self, session, botocore_client):
        """Test location constraint outside us-east-1."""
        await AsyncS3Client(S3Config(region='eu-west-1')).create_bucket('bucket')

        botocore_client.create_bucket.assert_awaited_once_with(
            Bucket='bucket',
            CreateBucketConfiguration={'LocationConstraint': 'eu-west-1'}
        )
