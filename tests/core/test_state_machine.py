"""
Test suite for document status transitions.

System role: Verification of lifecycle rules
"""

import pytest

from docagents.core.exceptions import IllegalTransitionError
from docagents.core.state_machine import (
    allowed_predecessors,
    can_transition,
    ensure_transition,
)
from docagents.models.document import DocumentStatus

PROCESSING = DocumentStatus.PROCESSING
READY = DocumentStatus.READY
FAILED = DocumentStatus.FAILED


class TestTransitions:
    """Test suite for can_transition and ensure_transition."""

    @pytest.mark.parametrize("new", [READY, FAILED])
    def test_processing_moves_to_terminal_states(self, new: DocumentStatus) -> None:
        assert can_transition(PROCESSING, new)

    @pytest.mark.parametrize(
        "current,new",
        [(READY, PROCESSING), (READY, FAILED), (FAILED, READY), (FAILED, PROCESSING)],
    )
    def test_terminal_states_are_final(self, current, new) -> None:
        assert not can_transition(current, new)
        with pytest.raises(IllegalTransitionError) as exc_info:
            ensure_transition("doc-1", current, new)
        assert exc_info.value.current == current.value
        assert exc_info.value.requested == new.value

    @pytest.mark.parametrize("state", list(DocumentStatus))
    def test_same_state_is_a_noop(self, state: DocumentStatus) -> None:
        ensure_transition("doc-1", state, state)


class TestAllowedPredecessors:
    """Test suite for compare-and-set predecessor sets."""

    def test_ready_is_reachable_from_processing_or_ready(self) -> None:
        assert allowed_predecessors(READY) == {PROCESSING, READY}

    def test_processing_is_reachable_only_from_itself(self) -> None:
        assert allowed_predecessors(PROCESSING) == {PROCESSING}
