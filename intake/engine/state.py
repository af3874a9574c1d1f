"""FormState - the always-complete mapping of field key to current value."""

import logging
from typing import Dict, Any, Iterator, List

from .errors import UnknownFieldError
from .schema import FormSpec, FieldValue, SemanticType

logger = logging.getLogger(__name__)


class FormState:
    """
    Current answers of one wizard session.

    Every key declared in the form schema has an entry at all times;
    no key is ever added or removed after construction.
    """

    def __init__(self, form: FormSpec):
        self.form = form
        self._values: Dict[str, FieldValue] = {
            spec.key: spec.empty_value() for spec in form.fields
        }

    def __getitem__(self, key: str) -> FieldValue:
        if key not in self._values:
            raise UnknownFieldError(key)
        return self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> FieldValue:
        return self._values.get(key, default)

    def keys(self):
        return self._values.keys()

    def update(self, key: str, value: FieldValue) -> 'FormState':
        """Replace the stored value for key, leaving every other key untouched.

        Args:
            key: Declared field key
            value: New value (string, boolean, or list of strings)

        Returns:
            This state, for chaining

        Raises:
            UnknownFieldError: If key is not declared in the form schema
        """
        if key not in self._values:
            raise UnknownFieldError(key)

        if isinstance(value, (list, tuple)):
            value = list(value)
        self._values[key] = value
        logger.debug("Field %s updated", key)
        return self

    def toggle_multi_select(self, key: str, option: str, included: bool) -> 'FormState':
        """Add or remove one option of a multi-select field.

        Adding appends the option only when absent. Removing drops every
        occurrence. The remaining entries keep their order.

        Args:
            key: Declared multi-select field key
            option: Option value to toggle
            included: True to select the option, False to deselect it

        Returns:
            This state, for chaining

        Raises:
            UnknownFieldError: If key is not declared in the form schema
        """
        if key not in self._values:
            raise UnknownFieldError(key)

        spec = self.form.get_field(key)
        assert spec.type == SemanticType.MULTI_SELECT, f"{key} is not a multi-select field"

        current: List[str] = list(self._values[key] or [])
        if included:
            selected = current if option in current else current + [option]
        else:
            selected = [entry for entry in current if entry != option]

        return self.update(key, selected)

    def as_dict(self) -> Dict[str, FieldValue]:
        """Shallow copy of all values; lists are copied too."""
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in self._values.items()
        }
