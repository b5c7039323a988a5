import uuid
from datetime import UTC, datetime

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds (JWT claim precision)."""
    return datetime.now(UTC).replace(microsecond=0)


class BaseModel(PydanticBaseModel):
    model_config = ConfigDict(str_strip_whitespace=False, validate_assignment=True)
