from typing import Optional

from pydantic import BaseModel, Field, field_validator


class MetadataRequest(BaseModel):
    url: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("url")
    @classmethod
    def normalize_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class UrlMetadata(BaseModel):
    title: str = "Untitled"
    description: str = ""
    favicon: Optional[str] = None
    image: Optional[str] = None
