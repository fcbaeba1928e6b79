from codedpad.domains.access.gate import (
    Visibility, AccessOutcome, evaluate, is_locked, normalize_protection
)

__all__ = [
    "Visibility", "AccessOutcome", "evaluate", "is_locked", "normalize_protection"
]
