"""Conditional reveal logic - which fields of a step are shown."""

from typing import List

from .schema import FieldSpec, FormSpec
from .state import FormState


def is_visible(spec: FieldSpec, state: FormState) -> bool:
    """Check whether a field is currently part of the rendered field set.

    Fields without a reveal rule are always visible. Hiding a field never
    touches its stored value.
    """
    rule = spec.reveal_when
    if rule is None:
        return True
    return state.get(rule.field) == rule.equals


def visible_fields(form: FormSpec, step: int, state: FormState) -> List[str]:
    """Keys of the visible fields of a step, in schema order.

    Args:
        form: Form specification
        step: 1-based step number
        state: Current form state

    Returns:
        List of field keys to render for the step
    """
    return [spec.key for spec in form.fields_for_step(step) if is_visible(spec, state)]
