"""
Pytest fixtures for delivery gate tests
"""

import pytest


@pytest.fixture
def onboarding_module_row():
    """
    A module as returned by a nested workflow select.

    Returns:
        Dict with steps, checklist items and a one-element gates list
    """
    return {
        "id": "mod-onboarding",
        "name": "Onboarding",
        "order_index": 1,
        "steps": [
            {
                "id": "step-utm",
                "name": "Configurar UTMs",
                "order_index": 2,
                "status": "doing",
                "checklist_items": [
                    {"id": "chk-utm-meta", "name": "UTMs Meta", "is_completed": True},
                    {"id": "chk-utm-google", "name": "UTMs Google", "is_completed": False},
                ],
            },
            {
                "id": "step-kickoff",
                "name": "Kickoff",
                "order_index": 1,
                "status": "done",
                "checklist_items": [],
            },
        ],
        "gates": [
            {"id": "gate-golive", "module_id": "mod-onboarding", "name": "Go-Live", "status": "failed"},
        ],
    }


@pytest.fixture
def done_step():
    return {"id": "s1", "name": "Kickoff", "status": "done"}
