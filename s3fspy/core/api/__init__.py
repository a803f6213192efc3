"""S3 client module."""
from .config import S3Config, ProxyConfig, SSLConfig, TimeoutConfig
from .protocols import S3ClientProtocol
from .async_client import AsyncS3Client

__all__ = [
    # Client
    'AsyncS3Client',
    'S3ClientProtocol',

    # Configuration
    'S3Config',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
]
