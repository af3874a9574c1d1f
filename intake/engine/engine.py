"""Core wizard engine - runs an intake form with DI."""

import importlib
import logging
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .errors import IncompleteStepError, SubmissionNotAllowedError, UnknownFieldError
from .loader import SpecLoader
from .navigation import NavigationController, StepRule, WizardSession
from .reveal import visible_fields
from .runner import FieldBinding, IntakeRunner
from .schema import FieldValue, NotificationKind, SemanticType, SubmissionRecord
from .state import FormState
from .submission import SubmissionHandler

logger = logging.getLogger(__name__)

PROGRESS_WIDTH = 20


class WizardEngine:
    """
    Runs one wizard session for a form with dependency injection.

    Key responsibilities:
    - Load the form spec and build the step table
    - Apply field edits to the form state
    - Gate navigation on step validators
    - Submit the final state through the runner
    - Support headless mode for testing
    """

    def __init__(self, runner: IntakeRunner, form_name: str = 'vera_client',
                 base_path: Optional[Path] = None,
                 validators: Optional[Dict[str, Callable[[FormState], bool]]] = None):
        """
        Initialize the wizard engine.

        Args:
            runner: IntakeRunner implementation for side effects
            form_name: Name of the form to run
            base_path: Directory holding the form specs (default: bundled forms)
            validators: Pre-registered validators by name; when omitted the
                        form's own module is registered automatically

        Raises:
            FileNotFoundError: If the form spec doesn't exist
            KeyError: If a step names a validator that isn't registered
        """
        self.runner = runner
        self.loader = SpecLoader(base_path=base_path)
        self.form = self.loader.load_form(form_name)
        self.validators: Dict[str, Callable[[FormState], bool]] = dict(validators or {})
        if validators is None:
            self._auto_register_form(self.form.name)

        self.steps = self._build_step_table()
        self.session = WizardSession(self.form)
        self.controller = NavigationController(
            self.session,
            self.steps,
            runner,
            rejection=self.form.messages.get(NotificationKind.VALIDATION_FAILURE),
        )
        self.submission = SubmissionHandler(
            self.form.name,
            runner,
            success=self.form.messages.get(NotificationKind.SUBMISSION_SUCCESS),
        )
        self.records: List[SubmissionRecord] = []
        self.headless_mode = False
        self.headless_inputs: Dict[str, Any] = {}

    def _auto_register_form(self, form_name: str):
        """Register every validator exported by the form's module as '<form>.<name>'."""
        module = importlib.import_module(f'intake.forms.{form_name}')
        for name in getattr(module, '__all__', []):
            self.validators[f'{form_name}.{name}'] = getattr(module, name)

    def _build_step_table(self) -> Dict[int, StepRule]:
        """Map each step number to its validator and visible field set."""
        table = {}
        for step in self.form.steps:
            if step.validator not in self.validators:
                raise KeyError(f"Validator not registered: {step.validator}")
            table[step.number] = StepRule(
                validator=self.validators[step.validator],
                visible_fields=partial(visible_fields, self.form, step.number),
            )
        return table

    # Session access

    @property
    def state(self) -> FormState:
        return self.session.form_state

    @property
    def current_step(self) -> int:
        return self.session.current_step

    def update(self, key: str, value: FieldValue) -> FormState:
        return self.state.update(key, value)

    def toggle_multi_select(self, key: str, option: str, included: bool) -> FormState:
        return self.state.toggle_multi_select(key, option, included)

    # Navigation

    def validate(self, step: Optional[int] = None) -> bool:
        return self.controller.validate(step)

    def visible_fields(self, step: Optional[int] = None) -> List[str]:
        return self.controller.visible_fields(step)

    def can_advance(self) -> bool:
        return self.controller.can_advance()

    def can_retreat(self) -> bool:
        return self.controller.can_retreat()

    def can_submit(self) -> bool:
        return self.controller.can_submit()

    def advance(self) -> bool:
        return self.controller.advance()

    def retreat(self) -> bool:
        return self.controller.retreat()

    def submit(self) -> SubmissionRecord:
        """
        Submit the current form state.

        Returns:
            The SubmissionRecord handed to the runner

        Raises:
            SubmissionNotAllowedError: If the session is not on the terminal step
        """
        if not self.controller.can_submit():
            raise SubmissionNotAllowedError(self.session.current_step, self.session.total_steps)

        record = self.submission.submit(self.state)
        self.records.append(record)
        return record

    # Rendering

    def field_bindings(self) -> List[FieldBinding]:
        """Bindings for the visible fields of the current step, in schema order."""
        bindings = []
        for key in self.visible_fields():
            spec = self.form.get_field(key)
            on_toggle = None
            if spec.type == SemanticType.MULTI_SELECT:
                on_toggle = partial(self.toggle_multi_select, key)
            bindings.append(FieldBinding(
                field=spec,
                value=self.state[key],
                on_change=partial(self.update, key),
                on_toggle=on_toggle,
            ))
        return bindings

    def _display_step_header(self):
        step = self.form.get_step(self.session.current_step)
        progress = self.session.progress()
        filled = round(progress / 100 * PROGRESS_WIDTH)
        bar = '#' * filled + '-' * (PROGRESS_WIDTH - filled)

        self.runner.display("")
        self.runner.display(f"[{bar}] {self.session.step_label()}")
        self.runner.display(f"== {step.title} ==")
        if step.note:
            self.runner.display(step.note)
        self.runner.display("")

    def _render_current_step(self):
        """Render visible fields one at a time.

        Visibility is re-evaluated after each field, so a field revealed by
        an earlier answer on the same step is asked right away.
        """
        rendered = set()
        while True:
            pending = [b for b in self.field_bindings() if b.key not in rendered]
            if not pending:
                return
            binding = pending[0]
            rendered.add(binding.key)

            if self.headless_mode:
                self.runner.display(binding.field.label)
                if binding.key in self.headless_inputs:
                    binding.on_change(binding.field.coerce(self.headless_inputs[binding.key]))
            else:
                self.runner.render_field(binding)

    def _ask_navigation(self) -> str:
        """Ask whether to go forward or back. Returns 'forward' or 'back'."""
        forward = 'a' if self.controller.can_submit() else 'w'
        if not self.controller.can_retreat():
            return 'forward'

        label = 'Absenden' if forward == 'a' else 'Weiter'
        while True:
            response = self.runner.get_input(f"{label} ({forward}) oder Zurück (z)", forward)
            choice = response.strip().lower()[:1]
            if choice == forward:
                return 'forward'
            if choice == 'z':
                return 'back'
            self.runner.display(f"Error: Invalid choice: {response}")

    def run(self, headless_inputs: Optional[Dict[str, Any]] = None) -> SubmissionRecord:
        """
        Run the wizard until the form is submitted.

        Args:
            headless_inputs: Optional dict of pre-provided answers by field key
                            If None: INTERACTIVE mode (fields rendered by the runner)
                            If provided: HEADLESS mode (use dict values)
                            Values are converted to each field's type first

        Returns:
            The submitted SubmissionRecord

        Raises:
            IncompleteStepError: In headless mode, when the answers leave a step incomplete
            UnknownFieldError: If headless_inputs names a field the form doesn't declare
        """
        self.headless_mode = (headless_inputs is not None)
        self.headless_inputs = headless_inputs or {}
        for key in self.headless_inputs:
            if key not in self.state:
                raise UnknownFieldError(key)

        self.runner.display(self.form.title)
        if self.form.description:
            self.runner.display(self.form.description)

        while True:
            self._display_step_header()
            self._render_current_step()

            direction = 'forward' if self.headless_mode else self._ask_navigation()
            if direction == 'back':
                self.controller.retreat()
                continue

            if self.controller.can_submit():
                return self.submit()

            if not self.controller.advance() and self.headless_mode:
                # Fail fast in tests
                raise IncompleteStepError(self.session.current_step)
