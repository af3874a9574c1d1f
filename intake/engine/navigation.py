"""Wizard session and navigation controller - the step state machine."""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional

from .runner import IntakeRunner
from .schema import FormSpec, Message, NotificationKind
from .state import FormState

logger = logging.getLogger(__name__)


class StepRule(NamedTuple):
    """Table entry for one step: completeness predicate and visible field set."""

    validator: Callable[[FormState], bool]
    visible_fields: Callable[[FormState], List[str]]


class WizardSession:
    """
    One in-progress wizard interaction.

    Owns the current step index and the form state. Sessions share no
    mutable state with each other.
    """

    def __init__(self, form: FormSpec):
        self.form = form
        self.current_step = 1
        self.form_state = FormState(form)

    @property
    def total_steps(self) -> int:
        return self.form.total_steps

    def progress(self) -> float:
        """Completion percentage shown by the progress bar."""
        return self.current_step / self.total_steps * 100

    def step_label(self) -> str:
        return f"Schritt {self.current_step} von {self.total_steps}"


class NavigationController:
    """
    Moves a session between steps 1..N.

    Advancing is gated on the current step's validator; retreating is
    always allowed above step 1. Every transition checks the bounds, so
    current_step never leaves [1, N].
    """

    def __init__(self, session: WizardSession, steps: Dict[int, StepRule],
                 runner: IntakeRunner, rejection: Optional[Message] = None):
        """
        Initialize the controller.

        Args:
            session: Session to navigate
            steps: Step table mapping step number to its StepRule
            runner: IntakeRunner used to notify about rejected advances
            rejection: Notification text for an incomplete step
        """
        missing = set(range(1, session.total_steps + 1)) - set(steps)
        if missing:
            raise KeyError(f"No step rule for steps: {sorted(missing)}")

        self.session = session
        self.steps = steps
        self.runner = runner
        self.rejection = rejection or Message(
            title="Incomplete step",
            description="Please fill in all required fields before continuing.",
        )

    def validate(self, step: Optional[int] = None) -> bool:
        """Evaluate a step's validator against the current form state."""
        if step is None:
            step = self.session.current_step
        return bool(self.steps[step].validator(self.session.form_state))

    def visible_fields(self, step: Optional[int] = None) -> List[str]:
        if step is None:
            step = self.session.current_step
        return self.steps[step].visible_fields(self.session.form_state)

    def is_terminal(self) -> bool:
        return self.session.current_step == self.session.total_steps

    def can_advance(self) -> bool:
        """Whether the advance control is enabled.

        Same condition advance() checks, so a disabled control and a
        rejected advance never disagree.
        """
        return not self.is_terminal() and self.validate()

    def can_retreat(self) -> bool:
        return self.session.current_step > 1

    def can_submit(self) -> bool:
        return self.is_terminal()

    def advance(self) -> bool:
        """Move to the next step if the current one is complete.

        An incomplete step is reported through the runner and leaves the
        session untouched. On the terminal step there is nothing to
        advance to.

        Returns:
            True if the step changed
        """
        current = self.session.current_step
        if not self.validate(current):
            logger.info("Advance from step %d rejected: step incomplete", current)
            self.runner.notify(
                NotificationKind.VALIDATION_FAILURE,
                self.rejection.description,
                title=self.rejection.title,
            )
            return False

        if current >= self.session.total_steps:
            return False

        self.session.current_step = current + 1
        logger.info("Advanced from step %d to %d", current, self.session.current_step)
        return True

    def retreat(self) -> bool:
        """Move to the previous step. Never validated.

        Returns:
            True if the step changed
        """
        current = self.session.current_step
        if current <= 1:
            return False

        self.session.current_step = current - 1
        logger.info("Retreated from step %d to %d", current, self.session.current_step)
        return True
