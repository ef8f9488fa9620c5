from typing import Optional


class LegalAssistantError(Exception):
    """Base error rendered as {"error": message, "detail": detail} by the API"""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_content(self) -> dict:
        content = {"error": self.message}
        if self.detail is not None:
            content["detail"] = self.detail
        return content


class ValidationError(LegalAssistantError):
    """Missing file or question, unsupported upload, empty extracted text"""
    status_code = 400


class NotFoundError(LegalAssistantError):
    """Unknown document id"""
    status_code = 404


class UpstreamError(LegalAssistantError):
    """Gemini transport or API failure"""
    status_code = 500


class ProcessingError(LegalAssistantError):
    """Unexpected failure inside the upload or chat pipeline"""
    status_code = 500
