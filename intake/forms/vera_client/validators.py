"""VERA IT client form step validators.

Each validator is a pure predicate over the form state and only decides
"present vs. empty". Formats (e.g. e-mail syntax) are not checked.
"""

from typing import Iterable

from intake.engine.state import FormState


def _filled(state: FormState, keys: Iterable[str], strip: bool = False) -> bool:
    for key in keys:
        value = state[key]
        if value is None:
            return False
        if strip:
            value = value.strip()
        if value == '':
            return False
    return True


def validate_step1(state: FormState) -> bool:
    """Basic data: name, e-mail, company name and industry, ignoring surrounding whitespace."""
    return _filled(state, ('name', 'email', 'companyName', 'industry'), strip=True)


def validate_step2(state: FormState) -> bool:
    """Team and phase: a selection for team size, revenue and product status."""
    return _filled(state, ('teamSize', 'revenue', 'hasProduct'))


def validate_step3(state: FormState) -> bool:
    """Goals: at least one main reason."""
    return len(state['mainReasons']) > 0


def validate_step4(state: FormState) -> bool:
    return _filled(state, ('hasTechTeam', 'timeline'))


def validate_step5(state: FormState) -> bool:
    return _filled(state, ('budget', 'hasWorkedWithAgencies'))


def validate_step6(state: FormState) -> bool:
    # No required fields on the last step
    return True
