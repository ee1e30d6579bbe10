# /videolib/models/upload_request.py

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Order matters: missing fields are reported in this order
REQUIRED_UPLOAD_FIELDS = ("title", "description", "originalName", "data")

class UploadRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str
    description: str
    original_name: str
    data: str
    folder: Optional[str] = None
    mime_type: Optional[Any] = None
