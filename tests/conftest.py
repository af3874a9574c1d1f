"""Shared fixtures for intake engine tests."""

import tempfile
from pathlib import Path

import pytest

from intake.engine.engine import WizardEngine
from intake.engine.runner import MockIntakeRunner


SMALL_FORM = """
name: small
version: "1.0"
title: Small form
messages:
  validationFailure:
    title: Incomplete
    description: Please fill in the required fields.
  submissionSuccess:
    title: Sent
    description: Thank you.
steps:
  - number: 1
    title: First
    validator: small.first
  - number: 2
    title: Second
    validator: small.second
fields:
  - key: name
    type: text
    step: 1
    required: true
    label: Name
  - key: choice
    type: enum
    step: 2
    label: Choice
    options:
      - {value: ja, label: Ja}
      - {value: nein, label: Nein}
  - key: details
    type: freeText
    step: 2
    label: Details
    reveal_when:
      field: choice
      equals: ja
"""


@pytest.fixture
def mock_runner():
    """Create a mock runner for testing."""
    return MockIntakeRunner()


@pytest.fixture
def engine(mock_runner):
    """Engine running the bundled VERA IT client form."""
    return WizardEngine(mock_runner)


@pytest.fixture
def forms_dir():
    """Temporary forms directory containing the 'small' form."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir) / "forms"
        (base / "small").mkdir(parents=True)
        (base / "small" / "spec.yaml").write_text(SMALL_FORM)
        yield base


@pytest.fixture
def small_engine(mock_runner, forms_dir):
    """Engine for the 'small' form with hand-registered validators."""
    validators = {
        'small.first': lambda state: state['name'].strip() != '',
        'small.second': lambda state: state['choice'] != '',
    }
    return WizardEngine(mock_runner, form_name='small', base_path=forms_dir, validators=validators)


def fill_step(engine, values):
    """Apply a dict of field values to the engine's form state."""
    for key, value in values.items():
        engine.update(key, value)


STEP_VALUES = {
    1: {'name': 'A', 'email': 'a@b.com', 'companyName': 'C', 'industry': 'I'},
    2: {'teamSize': '2-5', 'revenue': 'gruendung', 'hasProduct': 'nein'},
    3: {'mainReasons': ['X']},
    4: {'hasTechTeam': 'ja', 'timeline': 'sofort'},
    5: {'budget': 'bis-3k', 'hasWorkedWithAgencies': 'nein'},
}
