"""Shared fixtures for a2a-task-client tests."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from a2a_task_client.engine import A2ATaskEngine
from a2a_task_client.transport import A2ATransport

AGENT_URL = "http://test-agent:8080"

# ---------------------------------------------------------------------------
# Wire builders
# ---------------------------------------------------------------------------


def make_task(
    state: str | None = "completed",
    *,
    task_id: str = "task-1",
    artifacts: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    task: dict[str, Any] = {"id": task_id, **extra}
    if state is not None:
        task["status"] = {"state": state}
    if artifacts is not None:
        task["artifacts"] = artifacts
    return task


def make_artifact(
    parts: list[dict[str, Any]],
    *,
    name: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    artifact: dict[str, Any] = {"parts": parts}
    if name is not None:
        artifact["name"] = name
    if description is not None:
        artifact["description"] = description
    return artifact


def rpc_result(result: Any, *, rpc_id: str = "1") -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def rpc_error(
    code: int = -32001,
    message: str = "Task not found",
    data: Any = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": "1", "error": error}


# ---------------------------------------------------------------------------
# Scripted agent served through httpx.MockTransport
# ---------------------------------------------------------------------------


class ScriptedAgent:
    """Replays canned responses and records every request.

    Each entry is a JSON body (dict), an ``httpx.Response`` or an exception
    to raise. The last entry repeats once the script is exhausted.
    """

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.content]

    @property
    def methods(self) -> list[str]:
        return [body["method"] for body in self.bodies]


# ---------------------------------------------------------------------------
# Deterministic time and ids
# ---------------------------------------------------------------------------


class FakeClock:
    """Monotonic clock advanced only by :meth:`sleep`."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class SequentialIds:
    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._count = 0

    def next_id(self) -> str:
        self._count += 1
        return f"{self._prefix}-{self._count}"


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


def build_engine(
    agent: ScriptedAgent,
    clock: FakeClock | None = None,
    ids: SequentialIds | None = None,
) -> A2ATaskEngine:
    clock = clock or FakeClock()
    return A2ATaskEngine(
        A2ATransport(agent.client()),
        id_generator=ids or SequentialIds(),
        sleep=clock.sleep,
        clock=clock,
    )
