"""Assemble a task into the invocation output shape."""

from __future__ import annotations

from typing import Any

from .parts import parse_part
from .types import AssembledResult, Task


def _parse_artifact(
    artifact: dict[str, Any], artifact_index: int
) -> tuple[dict[str, Any], dict[str, bytes]]:
    record: dict[str, Any] = {
        "name": artifact.get("name"),
        "description": artifact.get("description"),
    }
    binary: dict[str, bytes] = {}

    parts = artifact.get("parts")
    if isinstance(parts, list):
        for part_index, wire in enumerate(parts):
            parsed = parse_part(wire, artifact_index=artifact_index, part_index=part_index)
            record.update(parsed.fields)
            binary.update(parsed.binary)

    return record, binary


def assemble_result(task: Task) -> AssembledResult:
    """Copy the task verbatim and add ``parsedArtifacts``.

    Each artifact becomes one flat record holding its ``name``,
    ``description`` and the index-tagged fields of its parts. Inline file
    bytes are returned in ``binary``; the JSON only references their keys.

    Raises:
        MalformedPartError: If an artifact part cannot be decoded.
    """
    output = task.to_wire()
    binary: dict[str, bytes] = {}

    if task.artifacts:
        parsed_artifacts: list[dict[str, Any]] = []
        for artifact_index, artifact in enumerate(task.artifacts):
            record, artifact_binary = _parse_artifact(artifact, artifact_index)
            parsed_artifacts.append(record)
            binary.update(artifact_binary)
        output["parsedArtifacts"] = parsed_artifacts

    return AssembledResult(json=output, binary=binary)
