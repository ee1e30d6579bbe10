# /videolib/models/blob_info.py

from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class BlobInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    content_type: Optional[str] = None
    size: int = 0

class CloudVideoSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    content_type: Optional[str] = None
    size: int
    display_name: str
    formatted_size: str
