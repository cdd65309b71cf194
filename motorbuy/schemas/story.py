from datetime import datetime
from typing import Optional

from pydantic import model_validator

from .base import ApiModel
from .vendor import VendorPublicOut


class StoryCreate(ApiModel):
    content: Optional[str] = None
    image_url: Optional[str] = None

    @model_validator(mode="after")
    def _not_empty(self):
        if not self.content and not self.image_url:
            raise ValueError("A story needs content or an image")
        return self


class StoryOut(ApiModel):
    id: str
    vendor_id: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    vendor: Optional[VendorPublicOut] = None
