"""
Shared test fixtures for unit and integration tests.
"""

import logging
from pathlib import Path

import pytest
from typing import Any, Dict

from arazzo_mermaid import logging_config
from arazzo_mermaid.state.arazzo_document import create_document


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo logger setup done by the CLI so tests stay independent."""
    yield
    logger = logging.getLogger(logging_config.ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_config._configured_loggers.clear()


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding sample Arazzo documents."""
    return FIXTURES_DIR


@pytest.fixture
def minimal_document() -> Dict[str, Any]:
    """One workflow with a single plain step."""
    return create_document("Workflows", [
        {
            "workflow_id": "workflowFoo",
            "steps": [{"step_id": "stepFoo"}],
        }
    ])


@pytest.fixture
def full_document() -> Dict[str, Any]:
    """Two workflows covering goto, end, nested criteria and a cross-workflow jump."""
    return create_document("Workflows", [
        {
            "workflow_id": "workflowFoo",
            "description": "Workflow foo's description.",
            "steps": [
                {
                    "step_id": "stepFoo",
                    "description": "Step foo's description.",
                    "success_criteria": [{"condition": "$statusCode == 200"}],
                    "on_success": [
                        {"name": "proceedToStepBar", "type": "goto", "step_id": "stepBar"}
                    ],
                    "on_failure": [
                        {"name": "proceedToStepBaz", "type": "goto", "step_id": "stepBaz"}
                    ],
                },
                {
                    "step_id": "stepBar",
                    "description": "Step bar's description.",
                    "success_criteria": [{"condition": "$statusCode == 200"}],
                    "on_success": [{"name": "done", "type": "end"}],
                    "on_failure": [
                        {"name": "proceedToStepBaz", "type": "goto", "step_id": "stepBaz"}
                    ],
                },
                {
                    "step_id": "stepBaz",
                    "description": "Step baz's description.",
                    "success_criteria": [{"condition": "$statusCode == 200"}],
                    "on_success": [
                        {"name": "proceedToWorkflowBar", "type": "goto", "workflow_id": "workflowBar"}
                    ],
                },
            ],
        },
        {
            "workflow_id": "workflowBar",
            "description": "Workflow bar's description.",
            "steps": [
                {
                    "step_id": "stepFoo",
                    "description": "Step foo's description.",
                    "success_criteria": [{"condition": "$statusCode == 200"}],
                    "on_success": [
                        {
                            "name": "proceedToStepBar",
                            "type": "goto",
                            "step_id": "stepBar",
                            "criteria": [{"condition": "$response.body.status == 'approved'"}],
                        }
                    ],
                    "on_failure": [
                        {
                            "name": "proceedToStepBaz",
                            "type": "goto",
                            "step_id": "stepBaz",
                            "criteria": [{"condition": "$response.body.error != null"}],
                        }
                    ],
                },
                {
                    "step_id": "stepBar",
                    "description": "Step bar's description.",
                    "success_criteria": [{"condition": "$statusCode == 200"}],
                    "on_success": [{"name": "done", "type": "end"}],
                    "on_failure": [
                        {"name": "proceedToStepBaz", "type": "goto", "step_id": "stepBaz"}
                    ],
                },
                {
                    "step_id": "stepBaz",
                    "description": "Step baz's description.",
                },
            ],
        },
    ])


@pytest.fixture
def full_mermaid() -> str:
    """Expected qualified rendering of full_document (and tests/fixtures/full.*)."""
    return (
        "---\n"
        "title: Workflows\n"
        "---\n"
        "flowchart TD\n"
        "    subgraph workflowFoo[\"Workflow foo's description.\"]\n"
        "    workflowFoo_stepFoo[\"Step foo's description.\"] --> workflowFoo_stepFooNode{$statusCode == 200}\n"
        "    workflowFoo_stepFooNode{$statusCode == 200} -->|true| workflowFoo_stepBar\n"
        "    workflowFoo_stepFooNode{$statusCode == 200} -->|false| workflowFoo_stepBaz\n"
        "    workflowFoo_stepBar[\"Step bar's description.\"] --> workflowFoo_stepBarNode{$statusCode == 200}\n"
        "    workflowFoo_stepBarNode{$statusCode == 200} -->|true| workflowFooEndNode((End))\n"
        "    workflowFoo_stepBarNode{$statusCode == 200} -->|false| workflowFoo_stepBaz\n"
        "    workflowFoo_stepBaz[\"Step baz's description.\"] --> workflowFoo_stepBazNode{$statusCode == 200}\n"
        "    workflowFoo_stepBazNode{$statusCode == 200} -->|true| workflowBar\n"
        "    workflowFoo_stepBazNode{$statusCode == 200} -->|false| workflowFooEndNode((End))\n"
        "    end\n"
        "    subgraph workflowBar[\"Workflow bar's description.\"]\n"
        "    workflowBar_stepFoo[\"Step foo's description.\"] --> workflowBar_stepFooNode{$statusCode == 200}\n"
        "    workflowBar_stepFooNode{$statusCode == 200} -->|true| workflowBar_proceedToStepBarNode{$response.body.status == 'approved'}\n"
        "    workflowBar_proceedToStepBarNode{$response.body.status == 'approved'} -->|true| workflowBar_stepBar\n"
        "    workflowBar_proceedToStepBarNode{$response.body.status == 'approved'} -->|false| workflowBarEndNode((End))\n"
        "    workflowBar_stepFooNode{$statusCode == 200} -->|false| workflowBar_proceedToStepBazNode{$response.body.error != null}\n"
        "    workflowBar_proceedToStepBazNode{$response.body.error != null} -->|true| workflowBar_stepBaz\n"
        "    workflowBar_proceedToStepBazNode{$response.body.error != null} -->|false| workflowBarEndNode((End))\n"
        "    workflowBar_stepBar[\"Step bar's description.\"] --> workflowBar_stepBarNode{$statusCode == 200}\n"
        "    workflowBar_stepBarNode{$statusCode == 200} -->|true| workflowBarEndNode((End))\n"
        "    workflowBar_stepBarNode{$statusCode == 200} -->|false| workflowBar_stepBaz\n"
        "    workflowBar_stepBaz[\"Step baz's description.\"] --> workflowBarEndNode((End))\n"
        "    end\n"
    )
