"""Type definitions for a2a-task-client.

Wire models follow the A2A ``tasks/*`` JSON schema: camelCase on the wire,
snake_case in Python. Parts are a tagged union on ``type``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)

DEFAULT_MIME_TYPE = "application/octet-stream"


class TaskState(StrEnum):
    """Known values of ``Task.status.state``.

    The wire value is an open string; use :func:`is_terminal_state` and
    :func:`is_pollable_state` rather than converting to this enum.
    """

    SUBMITTED = "submitted"
    WORKING = "working"
    INPUT_REQUIRED = "input-required"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


POLLABLE_STATES: frozenset[str] = frozenset(
    {TaskState.SUBMITTED, TaskState.WORKING, TaskState.INPUT_REQUIRED}
)
TERMINAL_STATES: frozenset[str] = frozenset(
    {TaskState.COMPLETED, TaskState.FAILED, TaskState.CANCELED}
)


def is_pollable_state(state: str | None) -> bool:
    return state in POLLABLE_STATES


def is_terminal_state(state: str | None) -> bool:
    return state in TERMINAL_STATES


# Optional wire fields left out when None. A data part's null payload is
# still sent.
_OMIT_IF_NONE = frozenset({"metadata", "name", "bytes", "uri"})


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_serializer(mode="wrap")
    def _omit_absent_optionals(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        data = handler(self)
        return {
            key: value
            for key, value in data.items()
            if not (value is None and key in _OMIT_IF_NONE)
        }


class FileContent(_WireModel):
    """File payload of a FilePart: inline base64 ``bytes`` or a ``uri``."""

    bytes: str | None = None
    uri: str | None = None
    mime_type: str = Field(DEFAULT_MIME_TYPE, alias="mimeType")
    name: str | None = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> FileContent:
        if (self.bytes is None) == (self.uri is None):
            raise ValueError("FileContent requires exactly one of 'bytes' or 'uri'")
        return self


class TextPart(_WireModel):
    type: Literal["text"] = "text"
    text: str
    metadata: dict[str, Any] | None = None


class DataPart(_WireModel):
    type: Literal["data"] = "data"
    data: Any
    metadata: dict[str, Any] | None = None


class FilePart(_WireModel):
    type: Literal["file"] = "file"
    file: FileContent
    metadata: dict[str, Any] | None = None


Part = Annotated[TextPart | DataPart | FilePart, Field(discriminator="type")]


class Message(_WireModel):
    """Message sent with ``tasks/send``."""

    role: Literal["user", "agent"] = "user"
    parts: list[Part]
    metadata: dict[str, Any] | None = None


class TaskStatus(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    state: str | None = None
    message: dict[str, Any] | None = None
    timestamp: str | None = None


class Task(BaseModel):
    """A task as returned by ``tasks/send``, ``tasks/get`` or ``tasks/cancel``.

    Unknown fields are kept so the task can be echoed back verbatim.
    Artifacts stay in wire form; :mod:`a2a_task_client.parts` decodes them.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: str | None = None
    session_id: str | None = Field(None, alias="sessionId")
    status: TaskStatus | None = None
    artifacts: list[dict[str, Any]] | None = None
    history: list[dict[str, Any]] | None = None
    metadata: dict[str, Any] | None = None

    @property
    def state(self) -> str | None:
        return self.status.state if self.status else None

    @property
    def is_terminal(self) -> bool:
        return is_terminal_state(self.state)

    @property
    def is_pollable(self) -> bool:
        return is_pollable_state(self.state)

    def to_wire(self) -> dict[str, Any]:
        """Return the task as the server sent it."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class AssembledResult(BaseModel):
    """Output of one task invocation.

    ``json`` holds the task fields plus ``parsedArtifacts``; ``binary`` maps
    binary keys (referenced from ``parsedArtifacts``) to decoded file bytes.
    """

    json_: dict[str, Any] = Field(alias="json")
    binary: dict[str, bytes] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def parsed_artifacts(self) -> list[dict[str, Any]]:
        return self.json_.get("parsedArtifacts", [])
