"""VERA IT new-client intake form."""

from .validators import (
    validate_step1,
    validate_step2,
    validate_step3,
    validate_step4,
    validate_step5,
    validate_step6,
)

__all__ = [
    'validate_step1',
    'validate_step2',
    'validate_step3',
    'validate_step4',
    'validate_step5',
    'validate_step6',
]
