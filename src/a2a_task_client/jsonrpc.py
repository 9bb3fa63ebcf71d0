"""JSON-RPC 2.0 request envelopes for the A2A ``tasks/*`` methods."""

from __future__ import annotations

from typing import Any, Literal, Protocol, runtime_checkable
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

METHOD_SEND_TASK = "tasks/send"
METHOD_GET_TASK = "tasks/get"
METHOD_CANCEL_TASK = "tasks/cancel"


@runtime_checkable
class IdGenerator(Protocol):
    """Source of fresh identifiers for correlation ids and new task ids."""

    def next_id(self) -> str: ...


class UUIDIdGenerator:
    """Default generator: random UUID4 strings."""

    def next_id(self) -> str:
        return str(uuid4())


_default_id_generator = UUIDIdGenerator()


class JSONRPCRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = "2.0"
    id: str
    method: str
    params: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def build_request(
    method: str,
    params: dict[str, Any],
    *,
    id_generator: IdGenerator | None = None,
) -> JSONRPCRequest:
    """Wrap ``method`` and ``params`` in an envelope with a fresh correlation id.

    The correlation id is unrelated to any task id in ``params``.
    """
    generator = id_generator or _default_id_generator
    return JSONRPCRequest(id=generator.next_id(), method=method, params=params)
