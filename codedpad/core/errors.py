from fastapi import status


class PadError(Exception):
    """Базовая ошибка домена"""

    reason = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"reason": self.reason, "message": self.message}


class InvalidInput(PadError):
    reason = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing or malformed fields"


class AlreadySaved(PadError):
    reason = "already_saved"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File already saved"


class UnsupportedMediaType(PadError):
    reason = "unsupported_media_type"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File type not allowed"


class Forbidden(PadError):
    reason = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(PadError):
    reason = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class PayloadTooLarge(PadError):
    reason = "payload_too_large"
    status_code = 413
    default_message = "File too large"


class StorageFailure(PadError):
    reason = "storage_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage operation failed"
