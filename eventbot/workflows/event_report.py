"""Event-report slot-filling workflow.

The canonical definition lives in data/workflows/event_report.jsonl
"""

from __future__ import annotations

from pathlib import Path

from eventbot.workflows.loader import load_workflow_jsonl
from eventbot.workflows.schema import EventReportWorkflowDef

_JSONL_PATH = Path(__file__).resolve().parent.parent.parent / "data" / "workflows" / "event_report.jsonl"

WORKFLOW_DEF: EventReportWorkflowDef = load_workflow_jsonl(_JSONL_PATH)

WORKFLOW_ID = WORKFLOW_DEF.id

# Order in which fields are asked; prompts are emitted one field per turn
FIELD_ORDER: list[str] = [slot.name for slot in WORKFLOW_DEF.slots]
