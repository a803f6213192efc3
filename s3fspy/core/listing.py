"""
Listing collation.

Turns the pages of a ``ListObjectsV2`` listing into file or folder records
relative to the listed folder. Every page is consumed, in order, before
anything is returned.
"""
from typing import Any, AsyncIterable, Callable, Dict, Iterable, List, Optional, TypeVar

from .logging import get_logger
from .models import FileListAttributes
from .path import S3Folder, S3File

T = TypeVar('T')

Page = Dict[str, Any]

DELIMITER = '/'

logger = get_logger('s3fspy.listing')


def listing_delimiter(include_sub_folders: bool) -> Optional[str]:
    """
    Delimiter for a listing request.

    Without a delimiter the store returns every nested key; with ``/`` it
    returns immediate children and rolls deeper keys into common prefixes.
    """
    return None if include_sub_folders else DELIMITER


async def collate(pages: AsyncIterable[Page], build: Callable[[Page], Iterable[T]]) -> List[T]:
    """
    Apply ``build`` to every page and concatenate the results.

    Args:
        pages: Listing pages in continuation-token order
        build: Function producing records from one page

    Returns:
        All records from all pages
    """
    results: List[T] = []
    page_count = 0
    async for page in pages:
        page_count += 1
        results.extend(build(page))
    logger.debug(f"Collated {len(results)} records from {page_count} pages")
    return results


def file_entries(folder: S3Folder) -> Callable[[Page], List[FileListAttributes]]:
    """Build FileListAttributes from the ``Contents`` of a page."""
    def build(page: Page) -> List[FileListAttributes]:
        entries = []
        for entry in page.get('Contents') or []:
            key = entry.get('Key')
            if not key:
                continue
            # directory markers are not files
            if key.endswith('/'):
                continue
            relative_path = key[len(folder.path):] if key.startswith(folder.path) else key
            entries.append(FileListAttributes(
                file=S3File(folder.bucket, key),
                e_tag=entry.get('ETag'),
                size=entry.get('Size'),
                last_modified=entry.get('LastModified'),
                relative_path=relative_path,
            ))
        return entries
    return build


def folder_entries(folder: S3Folder) -> Callable[[Page], List[S3Folder]]:
    """Build S3Folders from the ``CommonPrefixes`` of a page."""
    def build(page: Page) -> List[S3Folder]:
        return [
            S3Folder(folder.bucket, entry['Prefix'])
            for entry in page.get('CommonPrefixes') or []
            if entry.get('Prefix')
        ]
    return build
