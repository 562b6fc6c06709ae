"""Error taxonomy surfaced to API callers.

Client errors (bad or missing input) map to HTTP 400 with a short message.
Server errors (provider or internal failures) map to HTTP 500 and carry a
diagnostic ``details`` string.
"""
from typing import Optional


class AnalyzerError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ClientError(AnalyzerError):
    status_code = 400


class ServerError(AnalyzerError):
    status_code = 500


class UnsupportedFileType(ClientError):
    def __init__(self, media_type: Optional[str] = None):
        super().__init__("Unsupported file type. Upload a PDF or DOCX.")
        self.media_type = media_type


class EmptyDocument(ClientError):
    def __init__(self):
        super().__init__("Could not extract text from resume.")


class FileTooLarge(ClientError):
    def __init__(self, limit_bytes: int):
        limit_mb = limit_bytes / (1024 * 1024)
        super().__init__(f"File too large. Maximum size is {limit_mb:g} MB.")
        self.limit_bytes = limit_bytes


class ReviewFailed(ServerError):
    pass
