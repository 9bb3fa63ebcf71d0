"""Conversion between message/artifact parts and their wire form."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .exceptions import MalformedPartError
from .types import DEFAULT_MIME_TYPE, FileContent, FilePart, Part

logger = logging.getLogger(__name__)

_PART_ADAPTER: TypeAdapter[Part] = TypeAdapter(Part)

_PART_KINDS = ("text", "data", "file")


def encode_part(part: Part) -> dict[str, Any]:
    """Serialize a Part to its wire dict."""
    return part.model_dump(mode="json", by_alias=True)


def _part_kind(wire: Mapping[str, Any]) -> str | None:
    kind = wire.get("type")
    if kind is not None:
        return kind
    # Older agents omit the discriminator; infer it from the payload key.
    for candidate in _PART_KINDS:
        if candidate in wire:
            return candidate
    return None


def _has_file_source(file_obj: Any) -> bool:
    return isinstance(file_obj, Mapping) and (
        file_obj.get("bytes") is not None or bool(file_obj.get("uri"))
    )


def decode_part(
    wire: Mapping[str, Any],
    *,
    artifact_index: int | None = None,
    part_index: int | None = None,
) -> Part:
    """Parse a wire dict into a Part.

    Raises:
        MalformedPartError: If the part is not a valid text, data or file
            part, including a file part with neither ``bytes`` nor ``uri``.
    """
    kind = _part_kind(wire)
    if kind == "file" and not _has_file_source(wire.get("file")):
        raise MalformedPartError(
            "File part has neither 'bytes' nor 'uri'",
            artifact_index=artifact_index,
            part_index=part_index,
        )
    try:
        return _PART_ADAPTER.validate_python({**wire, "type": kind})
    except ValidationError as e:
        raise MalformedPartError(
            f"Invalid {kind or 'unknown'} part",
            artifact_index=artifact_index,
            part_index=part_index,
            cause=e,
        ) from e


def file_part_from_bytes(
    content: bytes,
    mime_type: str | None = None,
    name: str | None = None,
) -> FilePart:
    """Build an inline FilePart, base64-encoding ``content``."""
    return FilePart(
        file=FileContent(
            bytes=base64.b64encode(content).decode("ascii"),
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            name=name,
        )
    )


def file_part_from_uri(
    uri: str,
    mime_type: str | None = None,
    name: str | None = None,
) -> FilePart:
    """Build a FilePart referencing ``uri``. Nothing is fetched."""
    return FilePart(
        file=FileContent(uri=uri, mime_type=mime_type or DEFAULT_MIME_TYPE, name=name)
    )


def decode_file_bytes(file: FileContent) -> bytes:
    """Decode the inline payload of a file part.

    Raises:
        ValueError: If the file references a URI instead of inline bytes.
    """
    if file.bytes is None:
        raise ValueError("File has no inline 'bytes'; it references a URI instead")
    return base64.b64decode(file.bytes)


def binary_key(artifact_index: int, part_index: int, mime_type: str | None) -> str:
    """Lookup key for an inline file part, e.g. ``artifact_0_part_1_image_png``."""
    slug = mime_type.replace("/", "_", 1) if mime_type else "file"
    return f"artifact_{artifact_index}_part_{part_index}_{slug}"


@dataclass
class ParsedPart:
    """Flat record for one artifact part.

    ``fields`` is merged into the artifact's ``parsedArtifacts`` entry;
    ``binary`` holds decoded bytes for inline file parts, keyed by
    :func:`binary_key`.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    binary: dict[str, bytes] = field(default_factory=dict)


def parse_part(
    wire: Mapping[str, Any],
    *,
    artifact_index: int,
    part_index: int,
) -> ParsedPart:
    """Decode one artifact part into its flat, index-tagged representation.

    Raises:
        MalformedPartError: For a file part with neither bytes nor uri, or
            with bytes that are not valid base64.
    """
    if not isinstance(wire, Mapping):
        raise MalformedPartError(
            f"Part is not an object: {type(wire).__name__}",
            artifact_index=artifact_index,
            part_index=part_index,
        )
    prefix = f"part_{part_index}"
    parsed = ParsedPart()
    kind = _part_kind(wire)

    if kind == "text":
        parsed.fields[f"{prefix}_text"] = wire.get("text")
    elif kind == "data":
        parsed.fields[f"{prefix}_data"] = wire.get("data")
    elif kind == "file":
        file_obj = wire.get("file")
        if not _has_file_source(file_obj):
            raise MalformedPartError(
                "File part has neither 'bytes' nor 'uri'",
                artifact_index=artifact_index,
                part_index=part_index,
            )
        mime_type = file_obj.get("mimeType")
        if file_obj.get("bytes") is not None:
            try:
                content = base64.b64decode(file_obj["bytes"], validate=True)
            except (binascii.Error, TypeError, ValueError) as e:
                raise MalformedPartError(
                    "File part 'bytes' is not valid base64",
                    artifact_index=artifact_index,
                    part_index=part_index,
                    cause=e,
                ) from e
            key = binary_key(artifact_index, part_index, mime_type)
            parsed.binary[key] = content
            parsed.fields[f"{prefix}_binaryProperty"] = key
        else:
            parsed.fields[f"{prefix}_uri"] = file_obj["uri"]
        parsed.fields[f"{prefix}_mimeType"] = mime_type
    else:
        logger.debug(
            "Skipping part %d of artifact %d with unknown type %r",
            part_index,
            artifact_index,
            wire.get("type"),
        )

    return parsed

