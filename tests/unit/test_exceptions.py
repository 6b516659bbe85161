"""Tests for monitoring exceptions."""

from uuid_utils.compat import uuid7

from mindguard.core.exceptions import (
    HistoryRecordNotFoundError,
    InvalidRiskLevelError,
    NotFoundError,
    PersistenceFailureError,
    RiskStateError,
    SubjectNotFoundError,
)
from mindguard.utils.exceptions import MindguardError


class TestNotFoundErrors:
    """Tests for not-found errors."""

    def test_subject_not_found(self) -> None:
        """Test subject id is carried and rendered."""
        subject_id = uuid7()
        error = SubjectNotFoundError(subject_id)

        assert isinstance(error, NotFoundError)
        assert isinstance(error, MindguardError)
        assert error.subject_id == subject_id
        assert str(subject_id) in str(error)

    def test_history_record_not_found(self) -> None:
        """Test record id is carried and rendered."""
        record_id = uuid7()
        error = HistoryRecordNotFoundError(record_id)

        assert isinstance(error, NotFoundError)
        assert error.record_id == record_id
        assert str(error).startswith("HistoryRecordNotFoundError")


class TestStateErrors:
    """Tests for state and input errors."""

    def test_invalid_risk_level(self) -> None:
        """Test the offending value is kept."""
        error = InvalidRiskLevelError("critical")
        assert error.value == "critical"
        assert "'critical'" in str(error)

    def test_risk_state_error(self) -> None:
        """Test subject and level are rendered."""
        subject_id = uuid7()
        error = RiskStateError("Only a danger state can be resolved", subject_id, "normal")

        assert error.current_level == "normal"
        assert "level=normal" in str(error)
        assert str(subject_id) in str(error)

    def test_persistence_failure(self) -> None:
        """Test the failed operation is rendered."""
        error = PersistenceFailureError("disk full", operation="evaluate_risk")
        assert error.operation == "evaluate_risk"
        assert str(error) == "PersistenceFailureError(evaluate_risk): disk full"
