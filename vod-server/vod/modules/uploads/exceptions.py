"""Upload specific exceptions."""


class UploadRejectedError(Exception):
    """Raised when an uploaded file is not an acceptable video."""


class UploadTooLargeError(UploadRejectedError):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"File exceeds the {limit} byte upload limit")
        self.limit = limit
