"""Pydantic models for intake form schema validation."""

import copy
from datetime import datetime, timezone
from enum import Enum
from typing import List, Dict, Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator


FieldValue = Union[str, bool, None, List[str]]

TRUE_WORDS = ('y', 'yes', 'j', 'ja', 'true', '1')


class SemanticType(str, Enum):
    """Semantic type tag of an answer field.

    The engine never interprets values beyond "present vs. empty"; the tag
    only tells a renderer which widget to use and decides the initial value.
    """

    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    ENUM = "enum"
    MULTI_SELECT = "multi-select"
    FREE_TEXT = "freeText"
    BOOLEAN = "boolean"


class NotificationKind(str, Enum):
    """Kinds of user-visible notifications emitted by the engine."""

    VALIDATION_FAILURE = "validationFailure"
    SUBMISSION_SUCCESS = "submissionSuccess"


class Option(BaseModel):
    """A selectable value for enum and multi-select fields."""

    value: str
    label: str


class RevealRule(BaseModel):
    """Show a field only while another field holds a given value."""

    field: str = Field(..., description="Key of the controlling field")
    equals: Any = Field(..., description="Value that reveals the dependent field")


class FieldSpec(BaseModel):
    """
    Static declaration of one answer field.

    Never mutated at runtime.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Unique field key")
    type: SemanticType = Field(..., description="Semantic type tag")
    step: int = Field(..., ge=1, description="1-based home step")
    required: bool = Field(False, description="Checked by the step validator")
    label: str = Field("", description="Question text shown to the user")
    placeholder: Optional[str] = Field(None, description="Hint shown in empty inputs")
    options: Optional[List[Option]] = Field(None, description="Options for enum / multi-select")
    max_length: Optional[int] = Field(None, description="Renderer input limit")
    reveal_when: Optional[RevealRule] = Field(None, description="Conditional reveal rule")

    @model_validator(mode="after")
    def _options_for_choice_fields(self):
        if self.type in (SemanticType.ENUM, SemanticType.MULTI_SELECT) and not self.options:
            raise ValueError(f"Field '{self.key}' of type {self.type.value} needs options")
        return self

    def empty_value(self) -> FieldValue:
        """Initial value for this field in a fresh form state."""
        if self.type == SemanticType.MULTI_SELECT:
            return []
        if self.type == SemanticType.BOOLEAN:
            return None
        return ''

    def coerce(self, value: Any) -> FieldValue:
        """Convert a loosely typed value (e.g. a YAML scalar) to this field's value type.

        Text-like fields get a string, multi-select fields a list of strings,
        boolean fields a bool. None maps to the empty value.
        """
        if value is None:
            return self.empty_value()
        if self.type == SemanticType.MULTI_SELECT:
            items = value if isinstance(value, (list, tuple)) else [value]
            return [str(item) for item in items]
        if self.type == SemanticType.BOOLEAN:
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in TRUE_WORDS
        return str(value)

    def option_label(self, value: str) -> str:
        for option in self.options or []:
            if option.value == value:
                return option.label
        return value


class StepSpec(BaseModel):
    """One screen of the wizard."""

    number: int = Field(..., ge=1, description="1-based step index")
    title: str = Field(..., description="Heading shown above the step")
    validator: str = Field(..., description="Validator name (e.g., 'vera_client.validate_step1')")
    note: Optional[str] = Field(None, description="Informational text shown with the step")


class Message(BaseModel):
    title: str
    description: str


class FormSpec(BaseModel):
    """
    Complete specification of an intake form.

    Validates the structural invariants the engine relies on:
    - field keys are unique
    - steps are numbered 1..N without gaps
    - every field lives on a declared step
    - reveal rules only look at fields of the same or an earlier step
    """

    name: str = Field(..., description="Form identifier (e.g., 'vera_client')")
    version: Union[str, float] = Field(..., description="Form spec version")
    title: str = Field(..., description="Human-readable title")
    description: str = Field("", description="Introductory text")
    messages: Dict[NotificationKind, Message] = Field(default_factory=dict)
    steps: List[StepSpec] = Field(..., min_length=1)
    fields: List[FieldSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_structure(self):
        numbers = [step.number for step in self.steps]
        if numbers != list(range(1, len(self.steps) + 1)):
            raise ValueError(f"Steps must be numbered 1..{len(self.steps)} in order, got {numbers}")

        seen = {}
        for spec in self.fields:
            if spec.key in seen:
                raise ValueError(f"Duplicate field key: {spec.key}")
            if spec.step > len(self.steps):
                raise ValueError(f"Field '{spec.key}' references unknown step {spec.step}")
            seen[spec.key] = spec

        for spec in self.fields:
            rule = spec.reveal_when
            if rule is None:
                continue
            controller = seen.get(rule.field)
            if controller is None:
                raise ValueError(f"Reveal rule of '{spec.key}' references unknown field '{rule.field}'")
            if controller.step > spec.step:
                raise ValueError(
                    f"Reveal rule of '{spec.key}' (step {spec.step}) references "
                    f"'{rule.field}' from later step {controller.step}"
                )
        return self

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def get_step(self, number: int) -> StepSpec:
        return self.steps[number - 1]

    def get_field(self, key: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.key == key:
                return spec
        return None

    def fields_for_step(self, number: int) -> List[FieldSpec]:
        return [spec for spec in self.fields if spec.step == number]


class SubmissionRecord(BaseModel):
    """Immutable snapshot of a form state taken at submission time."""

    model_config = ConfigDict(frozen=True)

    form: str = Field(..., description="Name of the submitted form")
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    answers: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def snapshot(cls, form: str, values: Dict[str, Any]) -> "SubmissionRecord":
        """Build a record from live form values, copying every container."""
        return cls(form=form, answers=copy.deepcopy(dict(values)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'form': self.form,
            'submitted_at': self.submitted_at.isoformat(),
            'answers': copy.deepcopy(self.answers),
        }
