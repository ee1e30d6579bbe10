# /videolib/errors.py

from typing import Optional


class VideoLibraryError(Exception):
    """
    Base error for the service. `message` is the safe summary returned to the
    client, `detail` is logged server-side only.
    """
    status_code: int = 500
    default_message: str = "Internal server error."

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(detail or self.message)


class ValidationError(VideoLibraryError):
    status_code = 400
    default_message = "Invalid upload request."

    def __init__(self, message: Optional[str] = None, missing: tuple = ()) -> None:
        self.missing = tuple(missing)
        super().__init__(message)

    @classmethod
    def missing_fields(cls, missing: list) -> "ValidationError":
        return cls(f"Missing required fields: {', '.join(missing)}", missing=tuple(missing))


class ParseError(VideoLibraryError):
    status_code = 400
    default_message = "Invalid request payload."


class PathTraversalError(VideoLibraryError):
    status_code = 400
    default_message = "Invalid file path."


class NotFoundError(VideoLibraryError):
    status_code = 404
    default_message = "Not found"


class PayloadTooLargeError(VideoLibraryError):
    status_code = 413
    default_message = "Payload too large."


class ConfigurationError(VideoLibraryError):
    status_code = 500
    default_message = "File storage service is not configured."


class StorageWriteError(VideoLibraryError):
    status_code = 502
    default_message = "Failed to store uploaded file."


class StorageListError(VideoLibraryError):
    status_code = 502
    default_message = "Unable to load the cloud video library right now."
