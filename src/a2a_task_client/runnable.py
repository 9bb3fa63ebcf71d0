"""A2A task Runnable: LangChain integration for batch item processing."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from collections.abc import Sequence
from typing import Any

from langchain_core.runnables import Runnable, RunnableConfig
from pydantic import BaseModel, ConfigDict, Field

from .auth import A2AAuthConfig
from .config import OperationConfig
from .engine import A2ATaskEngine
from .transport import A2ATransport

logger = logging.getLogger(__name__)


class A2AItem(BaseModel):
    """One input record: the operation to run plus the item's own data.

    ``json`` is echoed back on failure in continue-on-fail mode; ``binary``
    supplies the bytes for file parts with ``file_source="binary"``.
    """

    model_config = ConfigDict(populate_by_name=True)

    params: OperationConfig
    json_: dict[str, Any] = Field(default_factory=dict, alias="json")
    binary: dict[str, bytes] = Field(default_factory=dict)


class A2AItemResult(BaseModel):
    """Output record for one input item.

    Successful items carry the assembled task (or agent card) in ``json``
    and decoded inline files in ``binary``. Failed items, in
    continue-on-fail mode, carry the original input ``json`` and ``error``.
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    json_: dict[str, Any] = Field(alias="json")
    binary: dict[str, bytes] = Field(default_factory=dict)
    paired_item: int | None = None
    error: Exception | None = None


class A2ATaskRunnable(Runnable[A2AItem, A2AItemResult]):
    """LangChain Runnable running one A2A operation per input item.

    Items are independent: ``abatch`` runs them concurrently, each with its
    own request context and wait timeout, sharing only the transport's
    connection pool.

    Usage:
        runnable = A2ATaskRunnable.from_secrets(api_key="secret")
        item = A2AItem(params=OperationConfig(
            agent_url="http://agent:8080",
            message_parts=[MessagePartConfig(text_content="hello")],
            wait_for_completion=True,
        ))
        result = await runnable.ainvoke(item)
        print(result.json_["parsedArtifacts"])

        # Batch, keeping failures alongside their inputs
        results = await runnable.aprocess_items(items, continue_on_fail=True)
    """

    def __init__(
        self,
        engine: A2ATaskEngine | None = None,
        *,
        auth: A2AAuthConfig | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the runnable.

        Args:
            engine: Engine to use. Defaults to one over a new transport.
            auth: Credentials sent with every request.
            timeout: Per-request HTTP timeout for a default transport.
        """
        self._engine = engine or A2ATaskEngine(A2ATransport(timeout=timeout))
        self._auth = auth

    @classmethod
    def from_secrets(
        cls,
        *,
        api_key: str | None = None,
        bearer_token: str | None = None,
        timeout: float = 30.0,
    ) -> A2ATaskRunnable:
        """Create a runnable from a credential record."""
        auth = A2AAuthConfig.from_secrets(api_key=api_key, bearer_token=bearer_token)
        return cls(auth=auth, timeout=timeout)

    @property
    def engine(self) -> A2ATaskEngine:
        return self._engine

    def _get_name(self) -> str:
        return "A2ATaskRunnable"

    async def ainvoke(
        self,
        input: A2AItem,
        config: RunnableConfig | None = None,
        **kwargs: Any,
    ) -> A2AItemResult:
        """Run the item's operation.

        Raises:
            A2AClientError: Any failure of the operation, by kind.
        """
        if kwargs:
            logger.debug("Ignoring unsupported kwargs in ainvoke: %s", set(kwargs))
        return await self._run_item(self._engine, input)

    async def _run_item(self, engine: A2ATaskEngine, input: A2AItem) -> A2AItemResult:
        result = await engine.run(
            input.params,
            auth=self._auth,
            binary=input.binary,
        )
        return A2AItemResult(json=result.json_, binary=result.binary)

    def invoke(
        self,
        input: A2AItem,
        config: RunnableConfig | None = None,
        **kwargs: Any,
    ) -> A2AItemResult:
        """Synchronous invocation, safe when an event loop is already running.

        Each call runs on its own event loop with its own transport, so the
        async client of :meth:`ainvoke` is neither reused nor closed here.
        """
        if kwargs:
            logger.debug("Ignoring unsupported kwargs in invoke: %s", set(kwargs))
        engine = self._engine.with_transport(self._engine.transport.detached())

        async def run_once() -> A2AItemResult:
            try:
                return await self._run_item(engine, input)
            finally:
                await engine.transport.close()

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(run_once())

        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
            return executor.submit(asyncio.run, run_once()).result()

    async def aprocess_items(
        self,
        items: Sequence[A2AItem],
        *,
        continue_on_fail: bool = False,
        max_concurrency: int | None = None,
    ) -> list[A2AItemResult]:
        """Process a batch of items concurrently.

        Args:
            items: Input items, each processed independently.
            continue_on_fail: Return failures as error outputs carrying the
                original item JSON instead of raising.
            max_concurrency: Optional cap on concurrent invocations.

        Returns:
            One result per item, in input order, with ``paired_item`` set.
        """
        config: RunnableConfig = {}
        if max_concurrency is not None:
            config["max_concurrency"] = max_concurrency

        results = await self.abatch(
            list(items), config, return_exceptions=continue_on_fail
        )

        outputs: list[A2AItemResult] = []
        for index, (item, result) in enumerate(zip(items, results, strict=True)):
            if isinstance(result, Exception):
                logger.warning("A2A item %d failed: %s", index, result)
                outputs.append(
                    A2AItemResult(json=item.json_, paired_item=index, error=result)
                )
            else:
                outputs.append(result.model_copy(update={"paired_item": index}))
        return outputs

    async def close(self) -> None:
        await self._engine.transport.close()

    async def __aenter__(self) -> A2ATaskRunnable:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
