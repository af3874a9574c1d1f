"""IntakeRunner interface - all side effects go here."""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union

import yaml

from .schema import TRUE_WORDS, FieldSpec, FieldValue, NotificationKind, SemanticType, SubmissionRecord

# Typed instead of an answer to reset a text or enum field to empty
CLEAR = '-'


class FieldBinding(NamedTuple):
    """What the engine hands a renderer for one visible field."""

    field: FieldSpec
    value: FieldValue
    on_change: Callable[[FieldValue], Any]
    on_toggle: Optional[Callable[[str, bool], Any]] = None

    @property
    def key(self) -> str:
        return self.field.key


class IntakeRunner(ABC):
    """Interface for rendering, notifications and submission transport."""

    @abstractmethod
    def notify(self, kind: NotificationKind, message: str, title: Optional[str] = None) -> None:
        """Show a notification. Fire-and-forget.

        Args:
            kind: Notification kind
            message: Notification body
            title: Optional short heading
        """
        pass

    @abstractmethod
    def send(self, record: SubmissionRecord) -> Any:
        """Hand a submission record to its destination.

        The engine does not wait on or interpret the return value.
        """
        pass

    @abstractmethod
    def display(self, message: str) -> None:
        """Display a message to the user.

        Args:
            message: Text to display (may contain newlines)
        """
        pass

    @abstractmethod
    def get_input(self, prompt: str, default: str = None) -> str:
        """Get input from user.

        Args:
            prompt: Question to ask user
            default: Default value if user presses Enter (shown in [brackets])

        Returns:
            User's input string (or default if empty)
        """
        pass

    @abstractmethod
    def render_field(self, binding: FieldBinding) -> None:
        """Render one field and report edits through binding.on_change / on_toggle."""
        pass



class RealIntakeRunner(IntakeRunner):
    """Real implementation - talks to the terminal and writes records."""

    def __init__(self, verbose: bool = False, output_dir: Optional[Union[str, Path]] = None):
        """Initialize with optional verbose mode and output directory.

        Args:
            verbose: If True, print extra diagnostics
            output_dir: Directory for submitted records (printed if None)
        """
        self.verbose = verbose
        # Check for verbose environment variable as well
        if os.environ.get('INTAKE_VERBOSE'):
            self.verbose = True
        self.output_dir = Path(output_dir) if output_dir else None

    def notify(self, kind: NotificationKind, message: str, title: Optional[str] = None) -> None:
        icon = '✗' if kind == NotificationKind.VALIDATION_FAILURE else '✓'
        if title:
            print(f"\n{icon} {title}\n  {message}\n")
        else:
            print(f"\n{icon} {message}\n")

    def send(self, record: SubmissionRecord) -> Optional[Path]:
        data = record.to_dict()
        content = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)

        if self.output_dir is None:
            self.display(content)
            return None

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"{record.form}-{record.submitted_at:%Y%m%dT%H%M%S%f}.yaml"
        if self.verbose:
            print(f"[VERBOSE] Writing submission to {path}")
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def display(self, message: str) -> None:
        """Print message to stdout."""
        print(message)

    def get_input(self, prompt: str, default: str = None) -> str:
        """Read from stdin with optional default."""
        if default:
            response = input(f"{prompt} [{default}]: ").strip()
            return response if response else default

        return input(f"{prompt}: ").strip()

    def render_field(self, binding: FieldBinding) -> None:
        """Prompt for one field until the answer fits the widget."""
        spec = binding.field
        marker = ' *' if spec.required else ''
        self.display(f"{spec.label}{marker}")
        if spec.placeholder:
            self.display(f"  ({spec.placeholder})")

        if spec.type == SemanticType.MULTI_SELECT:
            self._render_multi_select(binding)
        elif spec.type == SemanticType.ENUM:
            self._render_enum(binding)
        elif spec.type == SemanticType.BOOLEAN:
            default = None if binding.value is None else ('y' if binding.value else 'n')
            response = self.get_input("  y/n", default)
            if response:
                binding.on_change(response.lower() in TRUE_WORDS)
        else:
            if binding.value:
                self.display(f"  (Enter: beibehalten, {CLEAR}: leeren)")
            while True:
                response = self.get_input("  >", binding.value or None)
                if response == CLEAR:
                    binding.on_change('')
                    break
                if spec.max_length and len(response) > spec.max_length:
                    self.display(f"Error: max. {spec.max_length} characters allowed")
                    continue
                binding.on_change(response)
                break

    def _render_enum(self, binding: FieldBinding) -> None:
        spec = binding.field
        for i, option in enumerate(spec.options, 1):
            self.display(f"  {i}. {option.label}")

        while True:
            response = self.get_input("  Auswahl", binding.value or None)
            if not response:
                return
            if response == CLEAR:
                binding.on_change('')
                return
            value = self._resolve_option(spec, response)
            if value is None:
                self.display(f"Error: Invalid choice: {response}")
                continue
            binding.on_change(value)
            return

    def _render_multi_select(self, binding: FieldBinding) -> None:
        spec = binding.field
        selected = list(binding.value or [])
        for i, option in enumerate(spec.options, 1):
            mark = 'x' if option.value in selected else ' '
            self.display(f"  [{mark}] {i}. {option.label}")

        response = self.get_input("  Optionen umschalten (z.B. 1,3)")
        for token in response.replace(' ', '').split(','):
            if not token:
                continue
            value = self._resolve_option(spec, token)
            if value is None:
                self.display(f"Error: Invalid choice: {token}")
                continue
            included = value not in selected
            binding.on_toggle(value, included)
            if included:
                selected.append(value)
            else:
                selected = [entry for entry in selected if entry != value]

    @staticmethod
    def _resolve_option(spec: FieldSpec, response: str) -> Optional[str]:
        """Map a 1-based option number or a raw option value to the value."""
        if response.isdigit():
            index = int(response) - 1
            if 0 <= index < len(spec.options):
                return spec.options[index].value
        for option in spec.options:
            if option.value == response:
                return option.value
        return None


class MockIntakeRunner(IntakeRunner):
    """Mock for testing - records calls."""

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.input_queue = []  # Pre-scripted user inputs for testing
        self.answers: Dict[str, FieldValue] = {}  # Scripted field values by key

    def notify(self, kind: NotificationKind, message: str, title: Optional[str] = None) -> None:
        self.calls.append(('notify', kind, message, title))

    def send(self, record: SubmissionRecord) -> Any:
        self.calls.append(('send', record))
        return self.responses.get('send')

    def display(self, message: str) -> None:
        """Capture display call for test verification."""
        self.calls.append(('display', message))

    def get_input(self, prompt: str, default: str = None) -> str:
        """Return next value from input_queue."""
        self.calls.append(('get_input', prompt, default))

        if self.input_queue:
            response = self.input_queue.pop(0)
            return response if response else (default if default else '')

        return default if default else ''

    def render_field(self, binding: FieldBinding) -> None:
        """Apply the scripted answer for the field, if any."""
        self.calls.append(('render_field', binding.key, binding.value))

        if binding.key in self.answers:
            binding.on_change(self.answers[binding.key])

    def notifications(self, kind: Optional[NotificationKind] = None) -> List[tuple]:
        """Recorded notify calls, optionally filtered by kind."""
        return [
            call for call in self.calls
            if call[0] == 'notify' and (kind is None or call[1] == kind)
        ]
