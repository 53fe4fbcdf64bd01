"""
Document loader: reads Arazzo YAML/JSON and builds the in-memory document.

- Deterministic, no rendering here
- Structural checks only (types and required fields)
- Cross-references (goto targets) are left to the reader of the diagram
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, TextIO

import yaml

from arazzo_mermaid.state.arazzo_document import (
    ACTION_END,
    ACTION_GOTO,
    Action,
    ArazzoDocument,
    Criterion,
    Step,
    Workflow,
)

logger = logging.getLogger(__name__)


FORMAT_JSON = "json"
FORMAT_YAML = "yaml"

_SUFFIX_FORMATS = {
    ".json": FORMAT_JSON,
    ".yml": FORMAT_YAML,
    ".yaml": FORMAT_YAML,
}


class ArazzoLoadError(Exception):
    """Raised when a document cannot be read, parsed, or mapped to the schema."""
    pass


def detect_format(text: str, path: Optional[Path] = None) -> str:
    """
    Pick the serialization format of a document.

    The file suffix wins when it is known; otherwise a leading '{' means JSON
    and anything else is treated as YAML.
    """
    if path is not None:
        fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
        if fmt:
            return fmt
    if text.lstrip().startswith("{"):
        return FORMAT_JSON
    return FORMAT_YAML


def _require_mapping(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ArazzoLoadError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def _require_list(value: Any, where: str) -> list:
    if not isinstance(value, list):
        raise ArazzoLoadError(f"{where}: expected a list, got {type(value).__name__}")
    return value


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ArazzoLoadError(f"{where}.{key}: required string is missing")
    return value


def _optional_str(data: dict[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ArazzoLoadError(f"{where}.{key}: expected a string, got {type(value).__name__}")
    return value


def _parse_criteria(raw: Any, where: str) -> Optional[list[Criterion]]:
    if raw is None:
        return None

    criteria: list[Criterion] = []
    for i, item in enumerate(_require_list(raw, where)):
        item_where = f"{where}[{i}]"
        entry = _require_mapping(item, item_where)
        criteria.append({"condition": _optional_str(entry, "condition", item_where)})
    return criteria


def _parse_action(raw: Any, where: str) -> Action:
    data = _require_mapping(raw, where)

    action_type = _require_str(data, "type", where)
    if action_type not in (ACTION_GOTO, ACTION_END):
        raise ArazzoLoadError(
            f"{where}.type: unsupported action type '{action_type}' (expected goto or end)"
        )

    action: Action = {
        "name": _require_str(data, "name", where),
        "type": action_type,
        "workflow_id": _optional_str(data, "workflowId", where),
        "step_id": _optional_str(data, "stepId", where),
        "criteria": _parse_criteria(data.get("criteria"), f"{where}.criteria"),
    }

    if action_type == ACTION_GOTO and not (action["workflow_id"] or action["step_id"]):
        raise ArazzoLoadError(f"{where}: goto action requires stepId or workflowId")

    return action


def _parse_actions(raw: Any, where: str) -> Optional[list[Action]]:
    if raw is None:
        return None
    return [
        _parse_action(item, f"{where}[{i}]")
        for i, item in enumerate(_require_list(raw, where))
    ]


def _parse_step(raw: Any, where: str) -> Step:
    data = _require_mapping(raw, where)
    return {
        "step_id": _require_str(data, "stepId", where),
        "description": _optional_str(data, "description", where),
        "success_criteria": _parse_criteria(data.get("successCriteria"), f"{where}.successCriteria"),
        "on_success": _parse_actions(data.get("onSuccess"), f"{where}.onSuccess"),
        "on_failure": _parse_actions(data.get("onFailure"), f"{where}.onFailure"),
    }


def _parse_workflow(raw: Any, where: str) -> Workflow:
    data = _require_mapping(raw, where)
    steps = _require_list(data.get("steps"), f"{where}.steps")
    return {
        "workflow_id": _require_str(data, "workflowId", where),
        "description": _optional_str(data, "description", where),
        "steps": [_parse_step(step, f"{where}.steps[{i}]") for i, step in enumerate(steps)],
    }


def parse_document(raw: Any) -> ArazzoDocument:
    """
    Map a decoded Arazzo mapping (camelCase keys) onto the document schema.

    Args:
        raw: Result of yaml.safe_load / json.loads

    Returns:
        ArazzoDocument

    Raises:
        ArazzoLoadError: If a required field is missing or has the wrong type
    """
    data = _require_mapping(raw, "document")
    info = _require_mapping(data.get("info"), "info")
    workflows = _require_list(data.get("workflows"), "workflows")

    return {
        "info": {"title": _require_str(info, "title", "info")},
        "workflows": [
            _parse_workflow(workflow, f"workflows[{i}]")
            for i, workflow in enumerate(workflows)
        ],
    }


class DocumentLoader:
    """Load Arazzo documents from text, streams, or files."""

    @staticmethod
    def _decode(text: str, fmt: str) -> Any:
        if fmt == FORMAT_JSON:
            return json.loads(text)
        if fmt == FORMAT_YAML:
            return yaml.safe_load(text)
        raise ArazzoLoadError(f"Unknown document format: {fmt}")

    def load_text(self, text: str, fmt: Optional[str] = None, source: str = "<string>") -> ArazzoDocument:
        """
        Parse a document from text.

        When the format is sniffed as JSON and the JSON parse fails, the text
        is retried as YAML, since flow-style YAML also starts with '{'.

        Args:
            text: Serialized document
            fmt: "yaml" or "json"; detected from the text when omitted
            source: Name used in error messages

        Returns:
            ArazzoDocument

        Raises:
            ArazzoLoadError: If the text cannot be parsed or mapped
        """
        sniffed = fmt is None
        fmt = fmt or detect_format(text)
        logger.debug("Parsing %s as %s", source, fmt)

        try:
            raw = self._decode(text, fmt)
        except json.JSONDecodeError as e:
            if not sniffed:
                raise ArazzoLoadError(f"Invalid JSON in {source}: {e}") from e
            logger.debug("%s is not JSON, retrying as YAML", source)
            try:
                raw = yaml.safe_load(text)
            except yaml.YAMLError:
                raise ArazzoLoadError(f"Invalid JSON in {source}: {e}") from e
        except yaml.YAMLError as e:
            raise ArazzoLoadError(f"Invalid YAML in {source}: {e}") from e

        try:
            return parse_document(raw)
        except ArazzoLoadError as e:
            raise ArazzoLoadError(f"{source}: {e}") from e

    def load_stream(self, stream: TextIO, source: str = "<stdin>") -> ArazzoDocument:
        """
        Parse a document from an open text stream.

        Raises:
            ArazzoLoadError: If the stream cannot be read, decoded or parsed
        """
        try:
            text = stream.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ArazzoLoadError(f"Cannot read {source}: {e}") from e
        return self.load_text(text, source=source)

    def load_path(self, path: str | Path) -> ArazzoDocument:
        """
        Load a document from a file; a .json/.yml/.yaml suffix selects the
        format, anything else is sniffed from the text.

        Raises:
            ArazzoLoadError: If the file cannot be read, decoded or parsed
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ArazzoLoadError(f"Cannot read {path}: {e}") from e

        return self.load_text(text, fmt=_SUFFIX_FORMATS.get(path.suffix.lower()), source=str(path))
