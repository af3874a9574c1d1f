"""Intake engine - navigation, validation and state for step-by-step forms."""

from .engine import WizardEngine
from .errors import IntakeError, UnknownFieldError, SubmissionNotAllowedError, IncompleteStepError
from .loader import SpecLoader
from .navigation import NavigationController, StepRule, WizardSession
from .reveal import visible_fields
from .runner import IntakeRunner, RealIntakeRunner, MockIntakeRunner, FieldBinding
from .schema import FieldSpec, StepSpec, FormSpec, SubmissionRecord, SemanticType, NotificationKind
from .state import FormState
from .submission import SubmissionHandler

__all__ = [
    'WizardEngine',
    'IntakeError',
    'UnknownFieldError',
    'SubmissionNotAllowedError',
    'IncompleteStepError',
    'SpecLoader',
    'NavigationController',
    'StepRule',
    'WizardSession',
    'visible_fields',
    'IntakeRunner',
    'RealIntakeRunner',
    'MockIntakeRunner',
    'FieldBinding',
    'FieldSpec',
    'StepSpec',
    'FormSpec',
    'SubmissionRecord',
    'SemanticType',
    'NotificationKind',
    'FormState',
    'SubmissionHandler',
]
