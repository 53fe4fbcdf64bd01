"""
Arazzo document schema consumed by the diagram renderer.

Plain TypedDicts, snake_case keys:
- Built once by the document loader (or by hand in tests)
- Treated as read-only while rendering
- Optional fields are either absent or None
"""

from typing import Literal, Optional

from typing_extensions import NotRequired, TypedDict


ACTION_GOTO = "goto"
ACTION_END = "end"

ActionType = Literal["goto", "end"]


class Criterion(TypedDict):
    """One success criterion; the condition is an opaque expression."""
    condition: NotRequired[Optional[str]]


class Action(TypedDict):
    """
    Outcome handler attached to a step's on_success / on_failure bucket.

    Fields:
    - name: Action name (used for nested decision node names)
    - type: "goto" or "end"
    - workflow_id: Target workflow for cross-workflow jumps
    - step_id: Target step within the same workflow
    - criteria: Extra conditions evaluated before the action applies
    """
    name: str
    type: ActionType
    workflow_id: NotRequired[Optional[str]]
    step_id: NotRequired[Optional[str]]
    criteria: NotRequired[Optional[list[Criterion]]]


class Step(TypedDict):
    step_id: str
    description: NotRequired[Optional[str]]
    success_criteria: NotRequired[Optional[list[Criterion]]]
    on_success: NotRequired[Optional[list[Action]]]
    on_failure: NotRequired[Optional[list[Action]]]


class Workflow(TypedDict):
    workflow_id: str
    description: NotRequired[Optional[str]]
    steps: list[Step]


class Info(TypedDict):
    title: str


class ArazzoDocument(TypedDict):
    info: Info
    workflows: list[Workflow]


def create_document(title: str, workflows: Optional[list[Workflow]] = None) -> ArazzoDocument:
    """
    Create a document with the given title.

    Args:
        title: Document title (rendered as the diagram title)
        workflows: Workflows in document order

    Returns:
        New ArazzoDocument
    """
    return {
        "info": {"title": title},
        "workflows": list(workflows or []),
    }
