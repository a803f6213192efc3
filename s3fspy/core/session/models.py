"""Saved cursor record."""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any
import json

from ..path import S3Folder

TIMESTAMP_FIELDS = ('created_at', 'updated_at')


@dataclass
class SessionData:
    """
    Cursor saved between runs.

    The folder is only meaningful for the endpoint and region it was
    recorded against; see :meth:`matches`.

    Attributes:
        current_folder: Folder URL, None when no bucket is selected
        endpoint_url: Custom endpoint (None for AWS)
        region: Region of the endpoint
    """
    current_folder: Optional[str] = None
    endpoint_url: Optional[str] = None
    region: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def folder(self) -> Optional[S3Folder]:
        """Parsed folder, None if unset or not an s3 URL."""
        if not self.current_folder:
            return None
        return S3Folder.from_url(self.current_folder)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for name in TIMESTAMP_FIELDS:
            data[name] = data[name].isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionData':
        """Build from :meth:`to_dict` output; missing timestamps default to now."""
        timestamps = {
            name: datetime.fromisoformat(data[name])
            for name in TIMESTAMP_FIELDS
            if data.get(name)
        }
        return cls(
            current_folder=data.get('current_folder'),
            endpoint_url=data.get('endpoint_url'),
            region=data.get('region'),
            **timestamps
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'SessionData':
        return cls.from_dict(json.loads(json_str))

    def matches(self, endpoint_url: Optional[str], region: Optional[str]) -> bool:
        """True if this cursor was saved for ``endpoint_url`` and ``region``."""
        return self.endpoint_url == endpoint_url and self.region == region

    def update_timestamp(self) -> None:
        self.updated_at = datetime.now()
