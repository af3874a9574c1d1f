"""Submission handler - turns the final form state into a record."""

import logging
from typing import Optional

from .runner import IntakeRunner
from .schema import Message, NotificationKind, SubmissionRecord
from .state import FormState

logger = logging.getLogger(__name__)


class SubmissionHandler:
    """
    Snapshots the form state and hands it to the runner's transport.

    Delivery is fire-and-forget: whatever send() returns is logged and
    otherwise ignored. The form state is not cleared, so submitting again
    without edits yields a record with the same answers.
    """

    def __init__(self, form_name: str, runner: IntakeRunner, success: Optional[Message] = None):
        self.form_name = form_name
        self.runner = runner
        self.success = success

    def submit(self, form_state: FormState) -> SubmissionRecord:
        """
        Build and send the submission record.

        The caller decides whether submitting is allowed.

        Args:
            form_state: Final form state

        Returns:
            The immutable SubmissionRecord that was sent
        """
        record = SubmissionRecord.snapshot(self.form_name, form_state.as_dict())
        logger.info("Form submitted: %s", record.answers)

        result = self.runner.send(record)
        if result is not None:
            logger.debug("Transport returned %r", result)

        if self.success is not None:
            self.runner.notify(
                NotificationKind.SUBMISSION_SUCCESS,
                self.success.description,
                title=self.success.title,
            )
        return record
