"""Exceptions raised by the intake engine."""


class IntakeError(RuntimeError):
    """Base exception for intake engine errors."""
    pass


class UnknownFieldError(IntakeError, KeyError):
    """Raised when a key that is not declared in the form schema is written.

    This is a programming error, never a user-facing condition.
    """

    def __init__(self, key: str):
        super().__init__(f"Unknown form field: {key!r}")
        self.key = key

    def __str__(self) -> str:
        return self.args[0]


class SubmissionNotAllowedError(IntakeError):
    """Raised when submit is requested before the terminal step."""

    def __init__(self, current_step: int, total_steps: int):
        super().__init__(
            f"Submission is only possible on step {total_steps}, current step is {current_step}"
        )
        self.current_step = current_step
        self.total_steps = total_steps


class IncompleteStepError(IntakeError):
    """
    Raised by headless runs when a step cannot be completed.

    Interactive runs re-prompt instead.

    Attributes:
        step: Step number that failed validation.
    """

    def __init__(self, step: int, message: str = ''):
        super().__init__(message or f"Step {step} is incomplete")
        self.step = step
