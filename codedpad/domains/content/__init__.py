from codedpad.domains.content.schemas import (
    ContentResponse, PadlockVerifyRequest, UnlockedContent
)
from codedpad.domains.content.services import ContentService

__all__ = [
    "ContentResponse", "PadlockVerifyRequest", "UnlockedContent",
    "ContentService"
]
