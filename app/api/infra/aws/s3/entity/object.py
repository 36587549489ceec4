from dataclasses import dataclass, fields
from datetime import datetime
from typing import BinaryIO, Optional

from app.api.utils.string import underscore


@dataclass
class S3Object:
    body: BinaryIO
    content_length: int
    content_type: str
    last_modified: Optional[datetime]
    key: str

    def __init__(self, **kwargs):
        names = set([f.name for f in fields(self)])
        for name in names:
            setattr(self, name, None)
        for k, v in kwargs.items():
            key = underscore(k)
            if key in names:
                setattr(self, key, v)


@dataclass
class S3ObjectHead:
    content_length: int
    content_type: str
    e_tag: str
    last_modified: datetime

    def __init__(self, **kwargs):
        names = set([f.name for f in fields(self)])
        for name in names:
            setattr(self, name, None)
        for k, v in kwargs.items():
            key = underscore(k)
            if key in names:
                setattr(self, key, v)
