"""Exception hierarchy for a2a-task-client.

Every failure of a task invocation surfaces as one of these types, so a
caller can tell a transport failure from a protocol error, a malformed
response, a bad artifact part or a poll timeout, and render a precise
message from the context each one carries.
"""

from __future__ import annotations

from typing import Any, NoReturn


class A2AClientError(Exception):
    """Base exception for all a2a-task-client errors.

    Attributes:
        message: Human-readable error message.
        __cause__: Optional chained exception (from another error).
    """

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
    ) -> None:
        """Initialize A2A client error.

        Args:
            message: Error description.
            cause: Optional exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.__cause__ = cause


class PreconditionError(A2AClientError):
    """Caller-supplied input is invalid.

    Raised before any network call: a missing task id for ``tasks/get`` or
    ``tasks/cancel``, malformed JSON for a data part or metadata, an empty
    message, or a missing binary input.
    """


class TransportError(A2AClientError):
    """HTTP-level failure talking to the agent.

    Covers non-2xx statuses and bodies that are not valid JSON. Never
    retried by the client.

    Attributes:
        status_code: HTTP status code, when a response was received.
        body: Raw response body text, when available.
        url: The URL that was requested.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.body = body
        self.url = url


class A2AConnectionError(TransportError):
    """Connection to the A2A agent failed (DNS, refused, TLS)."""


class A2ATimeoutError(TransportError):
    """A single HTTP request to the A2A agent timed out."""


class ProtocolError(A2AClientError):
    """A2A protocol-level error (JSON-RPC error response).

    The agent answered with a JSON-RPC ``error`` member. This includes both
    standard JSON-RPC errors (-32700 to -32600) and A2A-specific errors
    (-32001 to -32006).

    Attributes:
        code: JSON-RPC error code.
        data: Optional error data from the server.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int,
        data: Any = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.code = code
        self.data = data


class TaskNotFoundError(ProtocolError):
    """Task ID not found on the A2A server (code -32001)."""


class TaskNotCancelableError(ProtocolError):
    """Task cannot be canceled in its current state (code -32002)."""


class UnsupportedOperationError(ProtocolError):
    """A2A agent does not support the requested operation (code -32004)."""


class ContentTypeNotSupportedError(ProtocolError):
    """Content type not supported by the A2A agent (code -32005)."""


class MalformedResponseError(A2AClientError):
    """The agent's response is not a usable JSON-RPC response.

    Raised when neither ``result`` nor ``error`` is present, or when the
    body is not a JSON object.

    Attributes:
        response: The decoded response body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        response: Any = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.response = response


class PollingError(MalformedResponseError):
    """A task fetched while waiting for completion has no ``status.state``."""


class MalformedPartError(A2AClientError):
    """An artifact part could not be decoded.

    Attributes:
        artifact_index: Index of the artifact holding the bad part.
        part_index: Index of the part inside that artifact.
    """

    def __init__(
        self,
        message: str,
        *,
        artifact_index: int | None = None,
        part_index: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        if artifact_index is not None and part_index is not None:
            message = f"{message} (artifact {artifact_index}, part {part_index})"
        super().__init__(message, cause=cause)
        self.artifact_index = artifact_index
        self.part_index = part_index


class TaskTimeoutError(A2AClientError):
    """Task did not reach a terminal state before the wait timeout.

    Attributes:
        task_id: ID of the task being waited on.
        last_state: Last observed ``status.state``.
        timeout: The configured timeout in seconds.
    """

    def __init__(
        self,
        message: str,
        *,
        task_id: str,
        last_state: str,
        timeout: float,
    ) -> None:
        super().__init__(message)
        self.task_id = task_id
        self.last_state = last_state
        self.timeout = timeout


# Error code mapping for JSON-RPC error responses
_ERROR_CODE_MAP: dict[int, type[ProtocolError]] = {
    -32001: TaskNotFoundError,
    -32002: TaskNotCancelableError,
    -32004: UnsupportedOperationError,
    -32005: ContentTypeNotSupportedError,
}


def _raise_for_rpc_error(error: Any) -> NoReturn:
    """Convert a JSON-RPC ``error`` member to a typed exception.

    Args:
        error: The decoded ``error`` object of a response (a mapping, or
            anything exposing ``code``/``message``/``data`` attributes).

    Raises:
        ProtocolError: Or one of its subclasses based on error code.
    """
    if isinstance(error, dict):
        error_code = error.get("code")
        error_message = error.get("message") or "Unknown error"
        error_data = error.get("data")
    else:
        error_code = getattr(error, "code", None)
        error_message = getattr(error, "message", None) or "Unknown error"
        error_data = getattr(error, "data", None)

    if not isinstance(error_code, int):
        error_code = 0

    exc_class = _ERROR_CODE_MAP.get(error_code, ProtocolError)

    raise exc_class(
        f"A2A agent error: {error_message} (code {error_code})",
        code=error_code,
        data=error_data,
    )
