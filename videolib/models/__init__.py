# /videolib/models/__init__.py

from .video_record import VideoRecord
from .upload_request import UploadRequest, REQUIRED_UPLOAD_FIELDS

from .blob_info import BlobInfo, CloudVideoSummary
