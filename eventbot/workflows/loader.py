"""Load JSONL workflow definitions into EventReportWorkflowDef objects."""

from __future__ import annotations

import json
from pathlib import Path

from eventbot.models.parameters import FIELD_NAMES
from eventbot.workflows.schema import EventReportWorkflowDef


def load_workflow_jsonl(path: str | Path) -> EventReportWorkflowDef:
    """Load a single workflow from a JSONL file.

    The JSONL file contains exactly one JSON object (the workflow).
    Slots are listed in the order they are asked.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8").strip()

    # JSONL: one JSON object per line, take the first non-empty line
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        data = json.loads(line)
        return _parse_workflow(data)

    raise ValueError(f"No workflow found in {path}")


def _parse_workflow(data: dict) -> EventReportWorkflowDef:
    """Parse a raw dict into an EventReportWorkflowDef."""
    workflow = EventReportWorkflowDef.model_validate(data)

    names = [slot.name for slot in workflow.slots]
    duplicates = {n for n in names if names.count(n) > 1}
    if duplicates:
        raise ValueError(f"Workflow {workflow.id} declares slots twice: {sorted(duplicates)}")

    unknown = [n for n in names if n not in FIELD_NAMES]
    if unknown:
        raise ValueError(f"Workflow {workflow.id} has slots with no report field: {unknown}")

    return workflow
