"""
S3FileSystem - folder/file view of an S3 object store.

Example:
    >>> async with S3FileSystem(config=S3Config.from_env()) as fs:
    ...     await fs.set_current_folder("s3://my-bucket/reports", create_bucket=True)
    ...     await fs.write_file("summary.txt", b"All good")
    ...     for entry in await fs.list_files():
    ...         print(entry.file.url, entry.size)
"""
from pathlib import Path
from urllib.parse import urlparse
from typing import Optional, List, Dict, Union

import aiofiles
from botocore.exceptions import ClientError

from .core.api import AsyncS3Client, S3ClientProtocol, S3Config
from .core.exceptions import (
    BucketDoesNotExist,
    InvalidInput,
    InvalidURL,
    Unexpected,
    convert_s3_error,
    error_code,
)
from .core.listing import collate, file_entries, folder_entries, listing_delimiter
from .core.logging import get_logger
from .core.models import (
    CreateBucketAttributes,
    FileAttributes,
    FileListAttributes,
    WriteFileAttributes,
)
from .core.navigation import NavigationState
from .core.path import S3Folder, S3File

FileRef = Union[str, S3File]

BUCKET_EXISTS_CODES = frozenset({'BucketAlreadyOwnedByYou'})


class S3FileSystem:
    """
    High-level async filesystem over an S3 object store.

    Holds a current folder (see :class:`NavigationState`). Every file
    operation takes either a name relative to the current folder or an
    absolute :class:`S3File`.

    Relative names are resolved as soon as the operation starts running,
    before its first suspension point. A started operation is unaffected by
    later cursor moves, so concurrent file operations are safe; concurrent
    cursor moves are not. Pass an S3File to pin the location up front.

    With an injected client:
        >>> fs = S3FileSystem(my_client)

    With configuration:
        >>> async with S3FileSystem(config=S3Config.with_endpoint("http://localhost:9000")) as fs:
        ...     await fs.set_current_folder("s3://bucket")
    """

    def __init__(
        self,
        client: Optional[S3ClientProtocol] = None,
        *,
        config: Optional[S3Config] = None,
        navigation: Optional[NavigationState] = None
    ):
        """
        Initialize the filesystem.

        Args:
            client: S3 client to use (an AsyncS3Client is created if omitted)
            config: Configuration for the created client
            navigation: Cursor state to use (a new one is created if omitted)
        """
        self._config = config or S3Config.default()
        self._owns_client = client is None
        self._client: S3ClientProtocol = client or AsyncS3Client(self._config)
        self._navigation = navigation or NavigationState()
        self._logger = get_logger('s3fspy.client')

    async def __aenter__(self) -> 'S3FileSystem':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the S3 client if this filesystem created it."""
        if self._owns_client:
            await self._client.close()

    @property
    def client(self) -> S3ClientProtocol:
        return self._client

    @property
    def config(self) -> S3Config:
        return self._config

    @property
    def navigation(self) -> NavigationState:
        return self._navigation

    @property
    def current_folder(self) -> Optional[S3Folder]:
        """Folder where relative operations take place."""
        return self._navigation.current_folder

    # =========================================================================
    # Navigation
    # =========================================================================

    async def set_current_folder(
        self,
        folder: Union[str, S3Folder],
        create_bucket: bool = False
    ) -> S3Folder:
        """
        Set the folder to work from.

        The bucket is verified to exist, or created when ``create_bucket`` is
        set, before the cursor moves.

        Args:
            folder: S3Folder or ``s3://`` URL
            create_bucket: Create the bucket if it doesn't exist

        Returns:
            The new current folder

        Raises:
            BucketDoesNotExist: If the bucket was not found
        """
        if isinstance(folder, str):
            parsed = S3Folder.from_url(folder)
            if parsed is None:
                raise InvalidInput(f"Not an s3 folder URL: {folder}")
            folder = parsed

        if create_bucket:
            await self.create_bucket(folder.bucket, exist_ok=True)
        else:
            await self._head_bucket(folder.bucket)

        self._navigation.set(folder)
        return folder

    def set_current_path(self, path: str) -> S3Folder:
        """
        Set the current folder within the current bucket.

        ``path`` is measured from the bucket root. Unlike
        :meth:`set_current_folder` nothing is checked on the server.

        Raises:
            InvalidAction: If no folder is selected
        """
        self._navigation.set_path(path)
        return self._navigation.current_folder

    def push_folder(self, name: str) -> S3Folder:
        """
        Enter subfolder ``name`` of the current folder.

        Raises:
            InvalidAction: If no folder is selected
            InvalidInput: If ``name`` is empty or has more than one segment
        """
        self._navigation.push(name)
        return self._navigation.current_folder

    def pop_folder(self) -> S3Folder:
        """
        Go up one folder level.

        Raises:
            InvalidAction: If no folder is selected or already at bucket root
        """
        self._navigation.pop()
        return self._navigation.current_folder

    # =========================================================================
    # Listing
    # =========================================================================

    async def list_files(self, include_sub_folders: bool = False) -> List[FileListAttributes]:
        """
        List files in the current folder.

        Args:
            include_sub_folders: Include files in subfolders, recursively
        """
        folder = self._navigation.require()
        return await self._list(folder, file_entries(folder), include_sub_folders)

    async def list_subfolders(self) -> List[S3Folder]:
        """List immediate subfolders of the current folder."""
        folder = self._navigation.require()
        return await self._list(folder, folder_entries(folder))

    async def _list(self, folder: S3Folder, build, include_sub_folders: bool = False):
        pages = self._client.list_objects_v2(
            folder.bucket,
            prefix=folder.path,
            delimiter=listing_delimiter(include_sub_folders),
        )
        try:
            return await collate(pages, build)
        except Exception as e:
            raise convert_s3_error(e) from e

    # =========================================================================
    # Files
    # =========================================================================

    def _resolve_file(self, file: FileRef) -> S3File:
        """Absolute address for a name in the current folder or an S3File."""
        if isinstance(file, S3File):
            return file
        return self._navigation.file(file)

    async def read_file(self, file: FileRef) -> bytes:
        """
        Read a file's contents.

        Raises:
            FileDoesNotExist: If the key is missing
            Unexpected: If the response carries no body
        """
        file = self._resolve_file(file)
        try:
            response = await self._client.get_object(file.bucket, file.key)
        except Exception as e:
            raise convert_s3_error(e) from e

        body = response.get('Body')
        if body is None:
            raise Unexpected(f"No body returned for {file.url}")
        return body

    async def write_file(
        self,
        file: FileRef,
        data: bytes,
        attributes: Optional[WriteFileAttributes] = None
    ) -> S3File:
        """
        Write data to a file.

        Args:
            file: File name in the current folder or S3File
            data: Contents
            attributes: ACL, content type/encoding and tags
        """
        file = self._resolve_file(file)
        attributes = attributes or WriteFileAttributes()
        try:
            await self._client.put_object(
                file.bucket,
                file.key,
                data,
                acl=attributes.acl,
                content_encoding=attributes.content_encoding,
                content_type=attributes.content_type,
                tagging=attributes.tagging,
            )
        except Exception as e:
            raise convert_s3_error(e) from e
        return file

    async def upload_file(
        self,
        local_path: Union[str, Path],
        name: Optional[FileRef] = None,
        attributes: Optional[WriteFileAttributes] = None
    ) -> S3File:
        """
        Upload a local file.

        Args:
            local_path: Path of the local file
            name: Destination (defaults to the local file name in the current folder)
            attributes: Write attributes

        Raises:
            FileNotFoundError: If the local file doesn't exist
        """
        local_path = Path(local_path)
        if not local_path.is_file():
            raise FileNotFoundError(f"File not found: {local_path}")

        file = self._resolve_file(name or local_path.name)
        async with aiofiles.open(local_path, 'rb') as f:
            data = await f.read()

        self._logger.info(f"Uploading {local_path} to {file.url} ({len(data)} bytes)")
        return await self.write_file(file, data, attributes)

    async def download_file(self, file: FileRef, local_path: Union[str, Path, None] = None) -> Path:
        """
        Download a file to disk.

        Args:
            file: File name in the current folder or S3File
            local_path: Destination path or directory (defaults to the file name)

        Returns:
            Path of the written file
        """
        file = self._resolve_file(file)
        data = await self.read_file(file)

        if local_path is None:
            path = Path(file.name)
        else:
            path = Path(local_path)
            if path.is_dir():
                path = path / file.name
        path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(path, 'wb') as f:
            await f.write(data)
        return path

    async def delete_file(self, file: FileRef) -> None:
        file = self._resolve_file(file)
        try:
            await self._client.delete_object(file.bucket, file.key)
        except Exception as e:
            raise convert_s3_error(e) from e

    async def copy_file(self, source: FileRef, destination: FileRef) -> S3File:
        """
        Copy a file.

        Args:
            source: Source name in the current folder or S3File
            destination: Destination name in the current folder or S3File
        """
        source = self._resolve_file(source)
        destination = self._resolve_file(destination)
        try:
            await self._client.copy_object(
                destination.bucket,
                destination.key,
                source_bucket=source.bucket,
                source_key=source.key,
            )
        except Exception as e:
            raise convert_s3_error(e) from e
        return destination

    async def get_file_attributes(self, file: FileRef) -> FileAttributes:
        """Get size, ETag, modification date and content headers of a file."""
        file = self._resolve_file(file)
        try:
            response = await self._client.head_object(file.bucket, file.key)
        except Exception as e:
            raise convert_s3_error(e) from e
        return FileAttributes.from_response(response)

    async def get_file_tagging(self, file: FileRef) -> Dict[str, str]:
        file = self._resolve_file(file)
        try:
            response = await self._client.get_object_tagging(file.bucket, file.key)
        except Exception as e:
            raise convert_s3_error(e) from e
        return {tag['Key']: tag['Value'] for tag in response.get('TagSet') or []}

    async def set_file_tagging(self, file: FileRef, tags: Dict[str, str]) -> None:
        """Replace the tag set of a file."""
        file = self._resolve_file(file)
        try:
            await self._client.put_object_tagging(file.bucket, file.key, tags)
        except Exception as e:
            raise convert_s3_error(e) from e

    async def set_file_acl(self, file: FileRef, acl: str) -> None:
        """
        Set access control for a file.

        Args:
            file: File name in the current folder or S3File
            acl: Canned ACL, e.g. 'private' or 'public-read'
        """
        file = self._resolve_file(file)
        try:
            await self._client.put_object_acl(file.bucket, file.key, acl)
        except Exception as e:
            raise convert_s3_error(e) from e

    async def read_file_url(self, file: FileRef, expires: Optional[int] = None) -> str:
        """Signed URL for reading a file, valid ``expires`` seconds."""
        return await self._sign_url('GET', self._resolve_file(file), expires)

    async def write_file_url(self, file: FileRef, expires: Optional[int] = None) -> str:
        """Signed URL for writing a file, valid ``expires`` seconds."""
        return await self._sign_url('PUT', self._resolve_file(file), expires)

    async def _sign_url(self, method: str, file: S3File, expires: Optional[int]) -> str:
        if expires is None:
            expires = self._config.default_expires
        try:
            url = await self._client.sign_url(method, file.bucket, file.key, expires)
        except Exception as e:
            raise InvalidURL(f"Cannot sign {method} URL for {file.url}: {e}") from e

        parsed = urlparse(url or '')
        if not parsed.scheme or not parsed.netloc:
            raise InvalidURL(f"Cannot sign {method} URL for {file.url}")
        return url

    # =========================================================================
    # Buckets
    # =========================================================================

    async def list_buckets(self) -> List[S3Folder]:
        """Return the buckets as root folders."""
        try:
            response = await self._client.list_buckets()
        except Exception as e:
            raise convert_s3_error(e) from e
        return [S3Folder(bucket['Name']) for bucket in response.get('Buckets') or [] if bucket.get('Name')]

    async def does_bucket_exist(self, bucket_name: str) -> bool:
        try:
            await self._client.head_bucket(bucket_name)
        except ClientError as e:
            self._logger.debug(f"Bucket {bucket_name} not reachable: {error_code(e)}")
            return False
        return True

    async def create_bucket(
        self,
        bucket_name: str,
        attributes: Optional[CreateBucketAttributes] = None,
        exist_ok: bool = False
    ) -> S3Folder:
        """
        Create a bucket.

        Args:
            bucket_name: Name of the bucket
            attributes: Bucket ACL
            exist_ok: Succeed if the bucket already exists and is ours

        Returns:
            Root folder of the bucket
        """
        acl = attributes.acl if attributes else None
        try:
            await self._client.create_bucket(bucket_name, acl=acl)
        except ClientError as e:
            if not (exist_ok and error_code(e) in BUCKET_EXISTS_CODES):
                raise convert_s3_error(e) from e
            self._logger.debug(f"Bucket {bucket_name} already exists")
        except Exception as e:
            raise convert_s3_error(e) from e
        else:
            self._logger.info(f"Bucket created: {bucket_name}")
        return S3Folder(bucket_name)

    async def delete_bucket(self, bucket_name: str) -> None:
        """
        Delete a bucket.

        If the current folder is in this bucket it is cleared first.
        """
        self._navigation.forget_bucket(bucket_name)
        try:
            await self._client.delete_bucket(bucket_name)
        except Exception as e:
            raise convert_s3_error(e) from e
        self._logger.info(f"Bucket deleted: {bucket_name}")

    async def _head_bucket(self, bucket_name: str) -> None:
        """Raise BucketDoesNotExist unless the bucket can be reached."""
        try:
            await self._client.head_bucket(bucket_name)
        except Exception as e:
            raise BucketDoesNotExist(f"Bucket does not exist: {bucket_name}") from e
