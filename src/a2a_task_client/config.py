"""Typed operation configuration consumed by the task engine.

One :class:`OperationConfig` describes a single invocation: which
operation to run against which agent, the message parts to send, and the
wait/timeout/poll settings. JSON given as text (data parts, metadata) is
parsed here so malformed input fails before any request is made.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .exceptions import PreconditionError
from .parts import file_part_from_bytes, file_part_from_uri
from .types import DEFAULT_MIME_TYPE, DataPart, Part, TextPart


class OperationKind(StrEnum):
    DISCOVER_AGENT = "discoverAgent"
    SEND_TASK = "sendTask"
    GET_TASK = "getTask"
    CANCEL_TASK = "cancelTask"


class PartType(StrEnum):
    TEXT = "text"
    DATA = "data"
    FILE = "file"


class FileSource(StrEnum):
    BINARY = "binary"
    URI = "uri"


class MessagePartConfig(BaseModel):
    """Definition of one outgoing message part."""

    part_type: PartType = PartType.TEXT
    text_content: str = ""
    # JSON text, or an already-decoded value
    json_data_content: Any = ""
    file_source: FileSource = FileSource.BINARY
    file_binary_property: str = "data"
    file_uri: str = ""
    file_mime_type: str = DEFAULT_MIME_TYPE


class OperationConfig(BaseModel):
    """Every recognized option of a single A2A invocation."""

    operation: OperationKind = OperationKind.SEND_TASK
    agent_url: str = Field(min_length=1)
    task_id: str | None = None
    message_parts: list[MessagePartConfig] = Field(default_factory=list)
    wait_for_completion: bool = False
    timeout_seconds: float = 60
    polling_interval_seconds: float = 5
    metadata: Any = "{}"

    @field_validator("task_id", mode="before")
    @classmethod
    def _empty_task_id_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def parse_json_value(value: Any, *, what: str) -> Any:
    """Decode ``value`` if it is JSON text; pass other values through.

    Raises:
        PreconditionError: If ``value`` is a string that is not valid JSON.
    """
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError as e:
        raise PreconditionError(f"Invalid JSON in {what}: {e}", cause=e) from e


def parse_metadata(value: Any) -> dict[str, Any]:
    """Decode task metadata, which must be a JSON object.

    ``None`` and blank strings mean "no metadata".
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return {}
    metadata = parse_json_value(value, what="Metadata parameter")
    if not isinstance(metadata, dict):
        raise PreconditionError(
            f"Metadata must be a JSON object, got {type(metadata).__name__}"
        )
    return metadata


def build_message_parts(
    configs: list[MessagePartConfig],
    binary: Mapping[str, bytes] | None = None,
) -> list[Part]:
    """Turn part definitions into wire-ready Parts.

    Args:
        configs: Part definitions, in message order.
        binary: Binary inputs of the current item, by property name.

    Raises:
        PreconditionError: If there are no parts, a data part holds invalid
            JSON, a URI part has no URI, or a binary property is missing.
    """
    if not configs:
        raise PreconditionError("Message Parts parameter is missing or invalid")

    parts: list[Part] = []
    for index, config in enumerate(configs):
        if config.part_type == PartType.TEXT:
            parts.append(TextPart(text=config.text_content))
        elif config.part_type == PartType.DATA:
            data = parse_json_value(
                config.json_data_content, what=f"Data Part Content (part {index})"
            )
            parts.append(DataPart(data=data))
        elif config.file_source == FileSource.URI:
            if not config.file_uri:
                raise PreconditionError(f"File URI is required (part {index})")
            parts.append(file_part_from_uri(config.file_uri, config.file_mime_type))
        else:
            property_name = config.file_binary_property or "data"
            content = (binary or {}).get(property_name)
            if content is None:
                raise PreconditionError(
                    f"No binary data found for property '{property_name}' "
                    f"(part {index})"
                )
            parts.append(file_part_from_bytes(content, config.file_mime_type))
    return parts
