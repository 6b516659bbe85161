"""Core exceptions for the risk monitoring engine."""

from uuid import UUID

from mindguard.utils.exceptions import MindguardError


class NotFoundError(MindguardError):
    """Raised when a monitored resource does not exist."""

    pass


class SubjectNotFoundError(NotFoundError):
    """Raised when a subject has no risk state.

    Attributes:
        subject_id: The identifier of the subject that was not found
    """

    def __init__(self, subject_id: UUID | str):
        super().__init__(f"Subject not found: {subject_id}")
        self.subject_id = subject_id

    def __str__(self) -> str:
        return f"SubjectNotFoundError: {self.args[0]}"


class HistoryRecordNotFoundError(NotFoundError):
    """Raised when a risk history record does not exist.

    Attributes:
        record_id: The identifier of the missing record
    """

    def __init__(self, record_id: UUID | str):
        super().__init__(f"Risk history record not found: {record_id}")
        self.record_id = record_id

    def __str__(self) -> str:
        return f"HistoryRecordNotFoundError: {self.args[0]}"


class InvalidRiskLevelError(MindguardError):
    """Raised when a risk level tag is not recognized.

    This indicates an upstream contract violation and is never swallowed.

    Attributes:
        value: The offending level value
    """

    def __init__(self, value: object):
        super().__init__(f"Invalid risk level: {value!r}")
        self.value = value

    def __str__(self) -> str:
        return f"InvalidRiskLevelError: {self.args[0]}"


class RiskStateError(MindguardError):
    """Raised when a supervisor action does not apply to the current risk state.

    Attributes:
        subject_id: The subject the action targeted
        current_level: The subject's level at the time of the action
    """

    def __init__(self, message: str, subject_id: UUID | str, current_level: str):
        super().__init__(message)
        self.subject_id = subject_id
        self.current_level = current_level

    def __str__(self) -> str:
        return (
            f"RiskStateError: {self.args[0]} "
            f"(subject={self.subject_id}, level={self.current_level})"
        )


class PersistenceFailureError(MindguardError):
    """Raised when a unit of work could not be committed.

    The whole unit is rolled back; the caller decides whether to retry.

    Attributes:
        operation: The engine operation that failed
    """

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        return f"PersistenceFailureError({self.operation}): {self.args[0]}"
