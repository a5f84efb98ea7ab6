"""
Task queue domain models.

A Task is the unit of work moved between pipeline stages. The payload is
opaque to the queue and travels base64-encoded inside the JSON envelope.

Dependencies: pydantic, docagents.core.exceptions
System role: Queue message contract
"""

import builtins
import enum
import uuid
from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from docagents.core.exceptions import InvalidTaskError

DEFAULT_MAX_ATTEMPTS = 5

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class TaskType(str, enum.Enum):
    """Pipeline stage a task is routed to."""

    PARSE = "parse"
    ANALYZE = "analyze"


class Task(BaseModel):
    """Queue message envelope."""

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    id: uuid.UUID | None = Field(default=None, description="Assigned on enqueue when absent")
    type: TaskType | None = Field(default=None, description="Routing type; required to publish")
    payload: bytes = Field(default=b"", description="Stage-specific JSON payload")
    attempts: int = Field(default=0, ge=0, description="Failed deliveries so far")
    max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        ge=0,
        description="Delivery budget; 0 is treated as the default",
    )
    not_before: datetime | None = Field(
        default=None,
        description="Earliest time the handler may run (UTC)",
    )

    @property
    def effective_max_attempts(self) -> int:
        """Delivery budget with the zero-means-default rule applied."""
        return self.max_attempts or DEFAULT_MAX_ATTEMPTS

    @classmethod
    def for_payload(cls, task_type: TaskType, payload: BaseModel, **kwargs) -> "Task":
        """Build a task carrying a JSON-encoded payload model."""
        return cls(type=task_type, payload=payload.model_dump_json().encode("utf-8"), **kwargs)

    def decode_payload(self, payload_type: builtins.type[PayloadT]) -> PayloadT:
        """
        Parse the payload into a model.

        Raises:
            InvalidTaskError: Payload is not valid JSON for payload_type
        """
        try:
            return payload_type.model_validate_json(self.payload)
        except PydanticValidationError as e:
            raise InvalidTaskError(
                "invalid task payload",
                field="payload",
                details={"task_id": str(self.id), "error": str(e)},
            ) from e


class ParseTaskPayload(BaseModel):
    """Payload of a parse task."""

    document_id: uuid.UUID
    filename: str
    content: str


class AnalyzeTaskPayload(BaseModel):
    """Payload of an analyze task."""

    document_id: uuid.UUID
    chunk_ids: list[uuid.UUID] = Field(default_factory=list)
