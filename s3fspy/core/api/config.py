"""
S3 client configuration module.

Provides configuration for the aiobotocore S3 client used by s3fspy.
Credentials are not handled here; botocore's credential chain resolves them.
"""
import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union

from aiobotocore.config import AioConfig


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_proxy_url(self) -> Optional[str]:
        """Proxy URL with credentials inserted."""
        if not self.url:
            return None

        if self.username and self.password:
            if '://' in self.url:
                protocol, rest = self.url.split('://', 1)
                return f"{protocol}://{self.username}:{self.password}@{rest}"

        return self.url

    def to_botocore_proxies(self) -> Optional[Dict[str, str]]:
        """Convert to botocore ``proxies`` mapping."""
        url = self.to_proxy_url()
        if not url:
            return None
        return {'http': url, 'https': url}


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.

    ``verify=False`` disables certificate checks; ``ca_file`` points botocore
    at a custom CA bundle.
    """
    verify: bool = True
    ca_file: Optional[str] = None

    def to_verify(self) -> Union[bool, str]:
        """Value for the ``verify`` argument of create_client."""
        if not self.verify:
            return False
        return self.ca_file or True


@dataclass
class TimeoutConfig:
    """Timeout configuration, in seconds."""
    connect: float = 30.0
    read: float = 60.0


@dataclass
class S3Config:
    """
    Complete S3 client configuration.

    Example:
        >>> config = S3Config.with_endpoint("http://localhost:9000", region="eu-west-1")
        >>> async with S3FileSystem(config=config) as fs:
        ...     await fs.set_current_folder("s3://my-bucket")
    """
    # Endpoint; None means the AWS endpoint for the region
    endpoint_url: Optional[str] = None
    region: str = 'us-east-1'

    # Request signing and addressing
    addressing_style: str = 'auto'
    signature_version: str = 's3v4'

    # Sub-configurations
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    # Connection pool size
    max_pool_connections: int = 10

    # Default lifetime of signed URLs
    default_expires: int = 86400

    @classmethod
    def default(cls) -> 'S3Config':
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls, **kwargs) -> 'S3Config':
        """
        Create configuration from the environment.

        Reads ``S3_ENDPOINT`` and ``AWS_REGION`` / ``AWS_DEFAULT_REGION``.
        """
        region = os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION')
        if region:
            kwargs.setdefault('region', region)
        endpoint = os.environ.get('S3_ENDPOINT')
        if endpoint:
            kwargs.setdefault('endpoint_url', endpoint)
            kwargs.setdefault('addressing_style', 'path')
        return cls(**kwargs)

    @classmethod
    def with_endpoint(cls, endpoint_url: str, **kwargs) -> 'S3Config':
        """Create configuration for an S3-compatible endpoint (MinIO, localstack)."""
        kwargs.setdefault('addressing_style', 'path')
        return cls(endpoint_url=endpoint_url, **kwargs)

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'S3Config':
        """Create configuration with proxy."""
        return cls(proxy=ProxyConfig(url=proxy_url), **kwargs)

    @classmethod
    def insecure(cls, **kwargs) -> 'S3Config':
        """Create configuration with SSL verification disabled."""
        return cls(ssl=SSLConfig(verify=False), **kwargs)

    def to_client_config(self) -> AioConfig:
        """Build the aiobotocore client config."""
        return AioConfig(
            region_name=self.region,
            signature_version=self.signature_version,
            connect_timeout=self.timeout.connect,
            read_timeout=self.timeout.read,
            max_pool_connections=self.max_pool_connections,
            proxies=self.proxy.to_botocore_proxies() if self.proxy else None,
            s3={'addressing_style': self.addressing_style},
        )

    def get_client_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for ``AioSession.create_client('s3', ...)``."""
        kwargs: Dict[str, Any] = {
            'region_name': self.region,
            'verify': self.ssl.to_verify(),
            'config': self.to_client_config(),
        }
        if self.endpoint_url:
            kwargs['endpoint_url'] = self.endpoint_url
        return kwargs
