# /videolib/models/video_record.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from videolib.utils.misc import new_id, now_iso
from videolib.config import APIConfig

class VideoRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_id)
    title: str
    description: str
    folder: str = APIConfig.DEFAULT_FOLDER
    original_name: str
    file_name: str
    url: str
    created_at: str = Field(default_factory=now_iso)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)
