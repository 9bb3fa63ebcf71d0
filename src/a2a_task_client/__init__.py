"""a2a-task-client: a client for the A2A ``tasks/*`` JSON-RPC protocol.

Submit a task to a remote agent, optionally wait for it to finish by
polling, and decode its artifacts. A2ATaskEngine is the primary
abstraction; A2ATaskRunnable runs configured operations over batches of
items for LangChain pipelines.
"""

from .auth import A2AAuthConfig, APIKeyCredentials, BearerTokenCredentials
from .config import (
    FileSource,
    MessagePartConfig,
    OperationConfig,
    OperationKind,
    PartType,
    build_message_parts,
    parse_metadata,
)
from .engine import A2ATaskEngine, RequestContext
from .exceptions import (
    A2AClientError,
    A2AConnectionError,
    A2ATimeoutError,
    ContentTypeNotSupportedError,
    MalformedPartError,
    MalformedResponseError,
    PollingError,
    PreconditionError,
    ProtocolError,
    TaskNotCancelableError,
    TaskNotFoundError,
    TaskTimeoutError,
    TransportError,
    UnsupportedOperationError,
)
from .jsonrpc import IdGenerator, JSONRPCRequest, UUIDIdGenerator, build_request
from .parts import (
    ParsedPart,
    binary_key,
    decode_file_bytes,
    decode_part,
    encode_part,
    file_part_from_bytes,
    file_part_from_uri,
    parse_part,
)
from .results import assemble_result
from .runnable import A2AItem, A2AItemResult, A2ATaskRunnable
from .transport import A2ATransport
from .types import (
    AssembledResult,
    DataPart,
    FileContent,
    FilePart,
    Message,
    Part,
    Task,
    TaskState,
    TaskStatus,
    TextPart,
)

__all__ = [
    "A2AAuthConfig",
    "A2AClientError",
    "A2AConnectionError",
    "A2AItem",
    "A2AItemResult",
    "A2ATaskEngine",
    "A2ATaskRunnable",
    "A2ATimeoutError",
    "A2ATransport",
    "APIKeyCredentials",
    "AssembledResult",
    "BearerTokenCredentials",
    "ContentTypeNotSupportedError",
    "DataPart",
    "FileContent",
    "FilePart",
    "FileSource",
    "IdGenerator",
    "JSONRPCRequest",
    "MalformedPartError",
    "MalformedResponseError",
    "Message",
    "MessagePartConfig",
    "OperationConfig",
    "OperationKind",
    "ParsedPart",
    "Part",
    "PartType",
    "PollingError",
    "PreconditionError",
    "ProtocolError",
    "RequestContext",
    "Task",
    "TaskNotCancelableError",
    "TaskNotFoundError",
    "TaskState",
    "TaskStatus",
    "TaskTimeoutError",
    "TextPart",
    "TransportError",
    "UUIDIdGenerator",
    "UnsupportedOperationError",
    "assemble_result",
    "binary_key",
    "build_message_parts",
    "build_request",
    "decode_file_bytes",
    "decode_part",
    "encode_part",
    "file_part_from_bytes",
    "file_part_from_uri",
    "parse_metadata",
    "parse_part",
]
