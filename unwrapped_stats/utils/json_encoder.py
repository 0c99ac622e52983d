"""Custom JSON encoding utilities"""
import dataclasses
import json
from datetime import datetime
from enum import Enum

from pydantic import BaseModel

class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder for datetimes, enums, dataclasses and pydantic models"""
    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode='json')
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)

def json_dumps(obj, **kwargs):
    """Helper function to dump JSON with datetime handling"""
    return json.dumps(obj, cls=DateTimeEncoder, **kwargs)
