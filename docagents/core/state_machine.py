"""
Document status state machine.

processing -> ready | failed. Terminal states have no way out; writing the
current status again is accepted as a no-op so redelivered tasks converge.

Dependencies: docagents.models, docagents.core.exceptions
System role: Lifecycle rules enforced by every document store
"""

from docagents.core.exceptions import IllegalTransitionError
from docagents.models.document import DocumentStatus

INITIAL_STATUS = DocumentStatus.PROCESSING

TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PROCESSING: frozenset({DocumentStatus.READY, DocumentStatus.FAILED}),
    DocumentStatus.READY: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}


def can_transition(current: DocumentStatus, new: DocumentStatus) -> bool:
    """Return True if a document in `current` may be set to `new`."""
    return current == new or new in TRANSITIONS[current]


def allowed_predecessors(new: DocumentStatus) -> frozenset[DocumentStatus]:
    """
    States from which `new` may be written.

    Used by stores to express the transition as a single conditional
    update (compare-and-set).
    """
    return frozenset(
        state for state in DocumentStatus if can_transition(state, new)
    )


def ensure_transition(
    document_id: str,
    current: DocumentStatus,
    new: DocumentStatus,
) -> None:
    """
    Validate a status change.

    Raises:
        IllegalTransitionError: Transition not allowed from current state
    """
    if not can_transition(current, new):
        raise IllegalTransitionError(str(document_id), current.value, new.value)
