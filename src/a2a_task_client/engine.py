"""Task lifecycle engine: submit, poll until terminal, fetch and cancel."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from .auth import A2AAuthConfig
from .config import (
    OperationConfig,
    OperationKind,
    build_message_parts,
    parse_metadata,
)
from .exceptions import (
    MalformedResponseError,
    PollingError,
    PreconditionError,
    TaskTimeoutError,
)
from .jsonrpc import (
    METHOD_CANCEL_TASK,
    METHOD_GET_TASK,
    METHOD_SEND_TASK,
    IdGenerator,
    UUIDIdGenerator,
    build_request,
)
from .results import assemble_result
from .transport import A2ATransport
from .types import AssembledResult, Message, Part, Task

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]

MIN_POLL_INTERVAL = 1.0
DEFAULT_TIMEOUT = 60.0
DEFAULT_POLL_INTERVAL = 5.0


@dataclass(frozen=True)
class RequestContext:
    """Per-invocation target: agent URL, credentials and optional task id.

    A ``task_id`` of ``None`` means "allocate a new one" for submissions.
    """

    agent_url: str
    auth: A2AAuthConfig | None = None
    task_id: str | None = None


def _to_task(
    result: Mapping[str, Any],
    *,
    error_cls: type[MalformedResponseError] = MalformedResponseError,
) -> Task:
    try:
        return Task.model_validate(result)
    except ValidationError as e:
        raise error_cls(
            f"A2A response error: result is not a valid task: {e}",
            response=result,
            cause=e,
        ) from e


class A2ATaskEngine:
    """Drives a task through ``tasks/send``, ``tasks/get`` and ``tasks/cancel``.

    Each invocation runs sequentially: at most one HTTP call is outstanding
    at a time, and the poll sleep is the only suspension point. Independent
    invocations may share one engine concurrently.

    Usage:
        engine = A2ATaskEngine(A2ATransport())
        ctx = RequestContext("http://agent:8080", auth=auth)
        task = await engine.send_task_and_wait(
            ctx, [TextPart(text="hello")], timeout=30, poll_interval=2
        )
    """

    def __init__(
        self,
        transport: A2ATransport,
        *,
        id_generator: IdGenerator | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize the engine.

        Args:
            transport: Transport used for every request.
            id_generator: Source of correlation ids and new task ids.
            sleep: Awaitable sleep used between polls.
            clock: Monotonic clock in seconds, used for the wait timeout.
        """
        self._transport = transport
        self._ids = id_generator or UUIDIdGenerator()
        self._sleep = sleep
        self._clock = clock

    @property
    def transport(self) -> A2ATransport:
        return self._transport

    def with_transport(self, transport: A2ATransport) -> A2ATaskEngine:
        """Copy of this engine sending through ``transport``."""
        return A2ATaskEngine(
            transport,
            id_generator=self._ids,
            sleep=self._sleep,
            clock=self._clock,
        )

    async def _call(
        self,
        context: RequestContext,
        method: str,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        request = build_request(method, params, id_generator=self._ids)
        return await self._transport.send(context.agent_url, request, context.auth)

    @staticmethod
    def _require_task_id(task_id: str | None, operation: str) -> str:
        if not task_id or not task_id.strip():
            raise PreconditionError(f"Task ID parameter is required for {operation}")
        return task_id

    async def _submit(
        self,
        context: RequestContext,
        parts: Sequence[Part],
        metadata: dict[str, Any] | None,
    ) -> tuple[str, Task]:
        if not parts:
            raise PreconditionError("Message must contain at least one part")
        task_id = context.task_id or self._ids.next_id()
        params = {
            "id": task_id,
            "message": Message(role="user", parts=list(parts)).model_dump(
                mode="json", by_alias=True
            ),
            "metadata": metadata or {},
        }
        result = await self._call(context, METHOD_SEND_TASK, params)
        task = _to_task(result)
        logger.debug("Submitted task %s, state %s", task.id or task_id, task.state)
        return task_id, task

    async def send_task(
        self,
        context: RequestContext,
        parts: Sequence[Part],
        *,
        metadata: dict[str, Any] | None = None,
    ) -> Task:
        """Submit a task and return the server's Task without waiting.

        Raises:
            PreconditionError: If ``parts`` is empty.
            TransportError: On HTTP-level failure.
            ProtocolError: If the agent returns a JSON-RPC error.
            MalformedResponseError: If the response is not a task.
        """
        _, task = await self._submit(context, parts, metadata)
        return task

    async def send_task_and_wait(
        self,
        context: RequestContext,
        parts: Sequence[Part],
        *,
        metadata: dict[str, Any] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> Task:
        """Submit a task and poll ``tasks/get`` until it leaves the pollable states.

        Polls use the task id echoed by the server, which may differ from
        the submitted one. ``poll_interval`` is clamped to at least one
        second. A submission without a state is returned as is, and states
        outside the known set stop the loop.

        Raises:
            TaskTimeoutError: If the task is still pollable at ``timeout``.
            PollingError: If a polled task has no ``status.state``.
            (plus everything :meth:`send_task` raises)
        """
        submitted_id, task = await self._submit(context, parts, metadata)
        if task.state is None:
            logger.warning(
                "Task %s was submitted without a status; not waiting for it",
                task.id or submitted_id,
            )
            return task
        return await self._wait(
            context,
            task,
            fallback_id=submitted_id,
            timeout=timeout,
            poll_interval=poll_interval,
        )

    async def _wait(
        self,
        context: RequestContext,
        task: Task,
        *,
        fallback_id: str,
        timeout: float,
        poll_interval: float,
    ) -> Task:
        interval = max(float(poll_interval), MIN_POLL_INTERVAL)
        start = self._clock()
        polls = 0

        def check_deadline(current: Task) -> None:
            if self._clock() - start >= timeout:
                raise TaskTimeoutError(
                    f"Task timed out after {timeout} seconds waiting for "
                    f"completion. Last state: {current.state}",
                    task_id=current.id or fallback_id,
                    last_state=current.state or "",
                    timeout=timeout,
                )

        while task.is_pollable:
            check_deadline(task)
            await self._sleep(interval)
            check_deadline(task)

            task_id = task.id or fallback_id
            result = await self._call(context, METHOD_GET_TASK, {"id": task_id})
            polls += 1
            task = _to_task(result, error_cls=PollingError)
            if task.state is None:
                raise PollingError(
                    "Polling error: received invalid task status during wait",
                    response=result,
                )
            logger.debug("Poll %d for task %s: %s", polls, task_id, task.state)

        if task.is_terminal:
            logger.info(
                "Task %s reached %s after %d poll(s)",
                task.id or fallback_id,
                task.state,
                polls,
            )
        else:
            logger.warning(
                "Task %s reported unrecognized state %r; not polling further",
                task.id or fallback_id,
                task.state,
            )
        return task

    async def get_task(
        self,
        context: RequestContext,
        task_id: str | None = None,
    ) -> Task:
        """Fetch a task via ``tasks/get``.

        Args:
            context: Target agent; its ``task_id`` is used if none is given.
            task_id: Task to fetch.

        Raises:
            PreconditionError: If no task id is available. Nothing is sent.
        """
        task_id = self._require_task_id(task_id or context.task_id, "Get Task")
        return _to_task(await self._call(context, METHOD_GET_TASK, {"id": task_id}))

    async def cancel_task(
        self,
        context: RequestContext,
        task_id: str | None = None,
    ) -> Task:
        """Request cancellation via ``tasks/cancel``.

        The returned Task is the server's post-cancellation view; it is not
        interpreted further.

        Raises:
            PreconditionError: If no task id is available. Nothing is sent.
        """
        task_id = self._require_task_id(task_id or context.task_id, "Cancel Task")
        return _to_task(await self._call(context, METHOD_CANCEL_TASK, {"id": task_id}))

    async def discover(self, context: RequestContext) -> Any:
        """Fetch the agent card of ``context.agent_url``."""
        return await self._transport.discover(context.agent_url)

    async def run(
        self,
        config: OperationConfig,
        *,
        auth: A2AAuthConfig | None = None,
        binary: Mapping[str, bytes] | None = None,
    ) -> AssembledResult:
        """Execute one configured operation and assemble its output.

        Args:
            config: Operation and its settings.
            auth: Credentials for the agent.
            binary: Binary inputs referenced by file parts.

        Returns:
            The assembled task, or the agent card for discovery.
        """
        context = RequestContext(config.agent_url, auth=auth, task_id=config.task_id)

        if config.operation == OperationKind.DISCOVER_AGENT:
            card = await self.discover(context)
            if not isinstance(card, dict):
                raise MalformedResponseError(
                    "Agent card is not a JSON object", response=card
                )
            return AssembledResult(json=card)

        if config.operation == OperationKind.SEND_TASK:
            metadata = parse_metadata(config.metadata)
            parts = build_message_parts(config.message_parts, binary)
            if config.wait_for_completion:
                task = await self.send_task_and_wait(
                    context,
                    parts,
                    metadata=metadata,
                    timeout=config.timeout_seconds,
                    poll_interval=config.polling_interval_seconds,
                )
            else:
                task = await self.send_task(context, parts, metadata=metadata)
        elif config.operation == OperationKind.GET_TASK:
            task = await self.get_task(context)
        elif config.operation == OperationKind.CANCEL_TASK:
            task = await self.cancel_task(context)
        else:
            raise PreconditionError(f"Unknown operation: {config.operation}")

        return assemble_result(task)
