"""
Deterministic diagram generation for Arazzo workflow documents.

Generates Mermaid flowcharts from a parsed ArazzoDocument:
- One subgraph per workflow, in document order
- [Step] rectangles, {Condition} decisions, ((End)) terminals
- Edges leaving decisions are labeled true (success) / false (failure)

The renderer is a pure function of its input: no I/O, no shared state.
"""

import logging
from pathlib import Path
from typing import Optional

from arazzo_mermaid import settings
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


INDENT = "    "
DECISION_SUFFIX = "Node"
END_SUFFIX = "EndNode"
END_LABEL = "((End))"

SUCCESS = "success"
FAILURE = "failure"
VERDICT_LABELS = {SUCCESS: "true", FAILURE: "false"}

NODE_NAMING_QUALIFIED = "qualified"
NODE_NAMING_BARE = "bare"
NODE_NAMING_POLICIES = (NODE_NAMING_QUALIFIED, NODE_NAMING_BARE)


def resolve_node_naming(node_naming: Optional[str] = None) -> str:
    """
    Pick the node naming policy for a render pass.

    Args:
        node_naming: Explicit policy, or None to use ARAZZO_MERMAID_NODE_NAMING

    Returns:
        "qualified" or "bare"

    Raises:
        ValueError: If the policy name is unknown
    """
    policy = (node_naming or settings.NODE_NAMING).strip().lower()
    if policy not in NODE_NAMING_POLICIES:
        raise ValueError(
            f"Unknown node naming policy: {policy!r}. Expected one of: {', '.join(NODE_NAMING_POLICIES)}"
        )
    return policy


class NodeNamer:
    """Build step-derived node names for one workflow under one naming policy."""

    def __init__(self, workflow_id: str, policy: str = NODE_NAMING_QUALIFIED):
        self.workflow_id = workflow_id
        self.policy = resolve_node_naming(policy)

    def __call__(self, identifier: str) -> str:
        if self.policy == NODE_NAMING_QUALIFIED:
            return f"{self.workflow_id}_{identifier}"
        return identifier


def should_branch(step: Step) -> bool:
    """A step branches if it declares success criteria or any outcome actions."""
    return any(
        step.get(key) is not None
        for key in ("success_criteria", "on_success", "on_failure")
    )


def compose_condition(criteria: Optional[list[Criterion]]) -> str:
    """
    Join the non-empty criterion conditions with ' && ', left to right.

    Returns an empty string when there are no usable conditions.
    """
    if not criteria:
        return ""
    return " && ".join(c.get("condition") for c in criteria if c.get("condition"))


def rectangle_node(name: str, label: Optional[str] = None) -> str:
    if label is None:
        return name
    return f'{name}["{label}"]'


def decision_node(name: str, criteria: Optional[list[Criterion]]) -> str:
    condition = compose_condition(criteria)
    if not condition:
        return f"{name}{DECISION_SUFFIX}"
    return f"{name}{DECISION_SUFFIX}{{{condition}}}"


def end_node(workflow_id: str) -> str:
    return f"{workflow_id}{END_SUFFIX}{END_LABEL}"


def subgraph_header(workflow_id: str, description: Optional[str] = None) -> str:
    if description is None:
        return f"{INDENT}subgraph {workflow_id}"
    return f'{INDENT}subgraph {workflow_id}["{description}"]'


def edge(source: str, target: str, verdict: Optional[str] = None) -> str:
    """
    Format one edge line.

    Args:
        source: Rendered source node
        target: Rendered target node
        verdict: SUCCESS / FAILURE for decision edges, None for plain edges

    Returns:
        Indented edge statement (no line terminator)
    """
    if verdict is None:
        return f"{INDENT}{source} --> {target}"
    return f"{INDENT}{source} -->|{VERDICT_LABELS[verdict]}| {target}"


def goto_target(action: Action, namer: NodeNamer) -> Optional[str]:
    """Resolve a goto target; a workflow jump wins over a step jump."""
    workflow_id = action.get("workflow_id")
    if workflow_id:
        return workflow_id
    step_id = action.get("step_id")
    if step_id:
        return namer(step_id)
    return None


def resolve_action(
    action: Action,
    verdict: str,
    source: str,
    workflow_id: str,
    namer: NodeNamer,
) -> list[str]:
    """
    Render the edges produced by a single outcome action.

    An action with its own criteria (even an empty list) first opens a nested
    decision named after the action. The action then applies on the nested
    decision's true branch, and its false branch ends the workflow.

    Args:
        action: First action of the outcome bucket
        verdict: SUCCESS or FAILURE, the bucket being resolved
        source: Rendered decision node the edges leave from
        workflow_id: Owning workflow (terminal node name)
        namer: Node namer for this render pass

    Returns:
        Edge lines in emission order

    Raises:
        ValueError: If the action type is neither goto nor end
    """
    lines = []
    nested = action.get("criteria") is not None

    if nested:
        nested_decision = decision_node(namer(action["name"]), action.get("criteria"))
        lines.append(edge(source, nested_decision, verdict))
        source = nested_decision
        verdict = SUCCESS

    action_type = action.get("type")
    if action_type == ACTION_GOTO:
        target = goto_target(action, namer)
        if target is None:
            logger.warning(
                "goto action '%s' in workflow '%s' names no stepId or workflowId; no edge emitted",
                action.get("name"),
                workflow_id,
            )
        else:
            lines.append(edge(source, target, verdict))
    elif action_type == ACTION_END:
        lines.append(edge(source, end_node(workflow_id), verdict))
    else:
        raise ValueError(f"Unknown action type: {action_type}")

    if nested:
        lines.append(edge(source, end_node(workflow_id), FAILURE))

    return lines


def resolve_outcome(
    step: Step,
    verdict: str,
    decision: str,
    next_step: Optional[Step],
    workflow_id: str,
    namer: NodeNamer,
) -> list[str]:
    """
    Resolve the success or failure outcome of a branching step.

    Only the first action of the bucket is honored. Without actions, success
    falls through to the next step (or the end on the last step) while failure
    always ends the workflow.
    """
    actions = step.get("on_success" if verdict == SUCCESS else "on_failure") or []
    if actions:
        return resolve_action(actions[0], verdict, decision, workflow_id, namer)

    if verdict == SUCCESS and next_step is not None:
        target = rectangle_node(namer(next_step["step_id"]), next_step.get("description"))
        return [edge(decision, target, SUCCESS)]

    return [edge(decision, end_node(workflow_id), verdict)]


def build_step_edges(
    step: Step,
    next_step: Optional[Step],
    workflow_id: str,
    namer: NodeNamer,
) -> list[str]:
    """Edges for one step: own decision first, then success, then failure."""
    rectangle = rectangle_node(namer(step["step_id"]), step.get("description"))

    if not should_branch(step):
        if next_step is not None:
            target = rectangle_node(namer(next_step["step_id"]), next_step.get("description"))
            return [edge(rectangle, target)]
        return [edge(rectangle, end_node(workflow_id))]

    decision = decision_node(namer(step["step_id"]), step.get("success_criteria"))
    lines = [edge(rectangle, decision)]
    lines.extend(resolve_outcome(step, SUCCESS, decision, next_step, workflow_id, namer))
    lines.extend(resolve_outcome(step, FAILURE, decision, next_step, workflow_id, namer))
    return lines


def build_workflow_subgraph(workflow: Workflow, node_naming: str) -> list[str]:
    workflow_id = workflow["workflow_id"]
    namer = NodeNamer(workflow_id, node_naming)
    steps = workflow.get("steps") or []

    logger.debug("Rendering workflow '%s' (%d steps)", workflow_id, len(steps))

    lines = [subgraph_header(workflow_id, workflow.get("description"))]
    for i, step in enumerate(steps):
        next_step = steps[i + 1] if i + 1 < len(steps) else None
        lines.extend(build_step_edges(step, next_step, workflow_id, namer))
    lines.append(f"{INDENT}end")

    return lines


def build_flowchart_mermaid(document: ArazzoDocument, node_naming: Optional[str] = None) -> str:
    """
    Generate a Mermaid flowchart from an Arazzo document.

    Uses:
    - ---/title/--- front matter with the document title
    - subgraph <workflowId>["description"] ... end per workflow
    - id["description"] for steps
    - idNode{condition} for decisions
    - <workflowId>EndNode((End)) for workflow ends

    Cross-references are not checked: a goto to an unknown step or workflow
    simply points at a node that is never defined.

    Args:
        document: Parsed Arazzo document
        node_naming: "qualified" (prefix step nodes with the workflow id) or
            "bare"; defaults to ARAZZO_MERMAID_NODE_NAMING

    Returns:
        Mermaid text, every line terminated by a newline
    """
    policy = resolve_node_naming(node_naming)

    lines = [
        "---",
        f"title: {document['info']['title']}",
        "---",
        "flowchart TD",
    ]

    for workflow in document.get("workflows") or []:
        lines.extend(build_workflow_subgraph(workflow, policy))

    return "\n".join(lines) + "\n"


def write_mermaid_artifact(file_path: str, content: str) -> None:
    """
    Write Mermaid content to a file, creating directories if needed.

    Args:
        file_path: Path to write to (e.g., "artifacts/workflows.mmd")
        content: Mermaid diagram content
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
