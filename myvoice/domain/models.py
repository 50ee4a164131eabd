from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Legacy records embedded payloads inline; these never leave the registry.
BINARY_FIELDS = frozenset({"audioData", "coverData", "audioBase64", "coverBase64"})


def normalize_demo_id(value: Any) -> str:
    """Return the canonical string form of a demo identifier."""

    if value is None or isinstance(value, bool):
        raise ValueError("demo id is required")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    normalized = str(value).strip()
    if not normalized:
        raise ValueError("demo id is required")
    return normalized


class CoverType(str, Enum):
    UPLOADED = "uploaded"
    RANDOM = "random"


class Demo(BaseModel):
    """Domain model for a demo recording's metadata"""

    id: str
    name: str
    audio_file: str = Field(default="", alias="audioFile")
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")
    cover_type: CoverType = Field(default=CoverType.RANDOM, alias="coverType")
    upload_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="uploadDate",
    )
    content_type: Optional[str] = Field(default=None, alias="contentType")
    audio_size: Optional[int] = Field(default=None, alias="audioSize")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        return normalize_demo_id(value)

    def to_document(self) -> dict[str, Any]:
        """Serialize using the camelCase keys stored in the registry."""

        return self.model_dump(by_alias=True, mode="json")
