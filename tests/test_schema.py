"""Tests for Pydantic schema models."""

import pytest
from pydantic import ValidationError
from intake.engine.schema import (
    FieldSpec, FormSpec, StepSpec, SubmissionRecord, SemanticType, NotificationKind
)


def _steps(count):
    return [
        StepSpec(number=i, title=f'Step {i}', validator=f'test.validate_step{i}')
        for i in range(1, count + 1)
    ]


def test_field_minimal_valid():
    """FieldSpec can be created with minimal required fields."""
    field = FieldSpec(key='name', type='text', step=1)

    assert field.key == 'name'
    assert field.type == SemanticType.TEXT
    assert field.step == 1
    assert field.required is False
    assert field.options is None
    assert field.reveal_when is None


def test_field_empty_values_by_type():
    """Each semantic type starts from its own empty value."""
    assert FieldSpec(key='a', type='text', step=1).empty_value() == ''
    assert FieldSpec(key='b', type='freeText', step=1).empty_value() == ''
    assert FieldSpec(key='c', type='boolean', step=1).empty_value() is None
    multi = FieldSpec(key='d', type='multi-select', step=1, options=[{'value': 'x', 'label': 'X'}])
    assert multi.empty_value() == []


def test_field_coerce_numbers_to_text():
    """Numeric YAML scalars end up as strings in text-like fields."""
    assert FieldSpec(key='companyName', type='text', step=1).coerce(1234) == '1234'
    assert FieldSpec(key='phone', type='phone', step=1).coerce('0171234567') == '0171234567'
    teams = FieldSpec(key='teamSize', type='enum', step=2, options=[{'value': '1', 'label': '1'}])
    assert teams.coerce(1) == '1'


def test_field_coerce_multi_select_and_boolean():
    multi = FieldSpec(key='d', type='multi-select', step=1, options=[{'value': '1', 'label': 'One'}])
    assert multi.coerce([1, 'x']) == ['1', 'x']
    assert multi.coerce('x') == ['x']
    assert multi.coerce(None) == []

    flag = FieldSpec(key='f', type='boolean', step=1)
    assert flag.coerce('ja') is True
    assert flag.coerce('nein') is False
    assert flag.coerce(False) is False
    assert flag.coerce(None) is None


def test_field_requires_known_type():
    """FieldSpec rejects unknown semantic types."""
    with pytest.raises(ValidationError):
        FieldSpec(key='name', type='date', step=1)


def test_enum_field_requires_options():
    """Enum fields without options are rejected."""
    with pytest.raises(ValidationError) as exc_info:
        FieldSpec(key='teamSize', type='enum', step=2)

    assert 'needs options' in str(exc_info.value)


def test_field_is_frozen():
    """FieldSpec cannot be mutated after creation."""
    field = FieldSpec(key='name', type='text', step=1)

    with pytest.raises(ValidationError):
        field.required = True


def test_option_label_lookup():
    field = FieldSpec(
        key='hasProduct', type='enum', step=2,
        options=[{'value': 'ja', 'label': 'Ja'}, {'value': 'nein', 'label': 'Nein'}]
    )

    assert field.option_label('ja') == 'Ja'
    assert field.option_label('unknown') == 'unknown'


def test_form_minimal():
    """FormSpec can be created with steps and fields."""
    form = FormSpec(
        name='test',
        version='1.0',
        title='Test form',
        steps=_steps(2),
        fields=[
            FieldSpec(key='name', type='text', step=1, required=True),
            FieldSpec(key='comment', type='freeText', step=2),
        ]
    )

    assert form.total_steps == 2
    assert [f.key for f in form.fields_for_step(1)] == ['name']
    assert form.get_field('comment').step == 2
    assert form.get_field('missing') is None
    assert form.get_step(2).title == 'Step 2'


def test_form_messages_keyed_by_kind():
    form = FormSpec(
        name='test', version='1.0', title='Test', steps=_steps(1),
        messages={'validationFailure': {'title': 'T', 'description': 'D'}},
    )

    assert form.messages[NotificationKind.VALIDATION_FAILURE].title == 'T'


def test_form_rejects_step_gaps():
    """Steps must be numbered 1..N without gaps."""
    steps = [
        StepSpec(number=1, title='One', validator='v1'),
        StepSpec(number=3, title='Three', validator='v3'),
    ]
    with pytest.raises(ValidationError) as exc_info:
        FormSpec(name='test', version='1.0', title='Test', steps=steps)

    assert 'numbered' in str(exc_info.value)


def test_form_rejects_duplicate_keys():
    with pytest.raises(ValidationError) as exc_info:
        FormSpec(
            name='test', version='1.0', title='Test', steps=_steps(1),
            fields=[
                FieldSpec(key='name', type='text', step=1),
                FieldSpec(key='name', type='text', step=1),
            ]
        )

    assert 'Duplicate field key' in str(exc_info.value)


def test_form_rejects_field_on_unknown_step():
    with pytest.raises(ValidationError) as exc_info:
        FormSpec(
            name='test', version='1.0', title='Test', steps=_steps(1),
            fields=[FieldSpec(key='name', type='text', step=2)]
        )

    assert 'unknown step' in str(exc_info.value)


def test_form_rejects_forward_reveal_rule():
    """A reveal rule may not depend on a field of a later step."""
    with pytest.raises(ValidationError) as exc_info:
        FormSpec(
            name='test', version='1.0', title='Test', steps=_steps(2),
            fields=[
                FieldSpec(key='details', type='freeText', step=1,
                          reveal_when={'field': 'choice', 'equals': 'ja'}),
                FieldSpec(key='choice', type='text', step=2),
            ]
        )

    assert 'later step' in str(exc_info.value)


def test_form_accepts_same_step_reveal_rule():
    form = FormSpec(
        name='test', version='1.0', title='Test', steps=_steps(1),
        fields=[
            FieldSpec(key='choice', type='text', step=1),
            FieldSpec(key='details', type='freeText', step=1,
                      reveal_when={'field': 'choice', 'equals': 'ja'}),
        ]
    )

    assert form.get_field('details').reveal_when.field == 'choice'


def test_form_rejects_reveal_rule_on_unknown_field():
    with pytest.raises(ValidationError):
        FormSpec(
            name='test', version='1.0', title='Test', steps=_steps(1),
            fields=[FieldSpec(key='details', type='freeText', step=1,
                              reveal_when={'field': 'nope', 'equals': 'ja'})]
        )


def test_submission_record_snapshot_copies_lists():
    """Later edits to the source values never reach the record."""
    values = {'name': 'A', 'mainReasons': ['X']}

    record = SubmissionRecord.snapshot('test', values)
    values['mainReasons'].append('Y')
    values['name'] = 'B'

    assert record.answers == {'name': 'A', 'mainReasons': ['X']}
    assert record.form == 'test'
    assert record.submitted_at.tzinfo is not None


def test_submission_record_is_frozen():
    record = SubmissionRecord.snapshot('test', {'name': 'A'})

    with pytest.raises(ValidationError):
        record.form = 'other'


def test_submission_record_to_dict():
    record = SubmissionRecord.snapshot('test', {'name': 'A'})

    data = record.to_dict()

    assert data['form'] == 'test'
    assert data['answers'] == {'name': 'A'}
    assert data['submitted_at'] == record.submitted_at.isoformat()
