"""Feed reader metadata attached to a capture."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, validator


class FeedEntry(BaseModel):
    """A single entry as reported by the feed reader."""

    title: str = ""
    link: str = ""
    authors: List[str] = []
    published: Optional[datetime] = None
    feed_title: str = ""
    feed_url: str = ""
    tags: List[str] = []

    @validator("authors", "tags", pre=True)
    def split_string(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @classmethod
    def coerce(cls, value: Any) -> Optional["FeedEntry"]:
        """Accept an entry model, a mapping, or nothing."""
        if value is None or isinstance(value, cls):
            return value
        return cls(**dict(value))
