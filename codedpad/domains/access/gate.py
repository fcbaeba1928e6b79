import hmac
from enum import Enum
from typing import Optional

from codedpad.core.errors import InvalidInput


class Visibility(str, Enum):
    """Видимость заметки или файла"""
    PUBLIC = "public"
    PRIVATE = "private"


class AccessOutcome(Enum):
    ACCESSIBLE = "accessible"
    LOCKED = "locked"


def evaluate(
    visibility: Visibility,
    stored_code: Optional[str],
    presented_code: Optional[str]
) -> AccessOutcome:
    """Решение о доступе к защищенному полю записи.

    Публичные записи доступны всегда. Приватные доступны только при точном
    совпадении кода замка; пустой код всегда дает LOCKED.
    """
    if Visibility(visibility) is Visibility.PUBLIC:
        return AccessOutcome.ACCESSIBLE

    if not presented_code or not stored_code:
        return AccessOutcome.LOCKED

    if hmac.compare_digest(presented_code.encode("utf-8"), stored_code.encode("utf-8")):
        return AccessOutcome.ACCESSIBLE

    return AccessOutcome.LOCKED


def is_locked(
    visibility: Visibility,
    stored_code: Optional[str],
    presented_code: Optional[str]
) -> bool:
    return evaluate(visibility, stored_code, presented_code) is AccessOutcome.LOCKED


def normalize_protection(
    visibility: Visibility,
    secondary_code: Optional[str]
) -> Optional[str]:
    """Код замка, который нужно сохранить для записи с данной видимостью"""
    if Visibility(visibility) is Visibility.PUBLIC:
        return None
    if not secondary_code:
        raise InvalidInput("Private items require a secondary code")
    return secondary_code
