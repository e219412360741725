from __future__ import annotations
import json
from typing import Any, Dict, Sequence
from legallens.utils.types import ChatTurn, Document
from legallens.report.text_export import sort_by_risk

def build_analysis_json(
    document: Document,
    conversation: Sequence[ChatTurn],
    meta: Dict[str, Any],
) -> str:
    """Return a structured JSON snapshot of the analysis and the chat trail.

    meta can include build/version info, model name, etc.
    """
    counts = {level: 0 for level in ("high", "medium", "low")}
    for c in document.clauses:
        counts[c.risk_level] = counts.get(c.risk_level, 0) + 1
    payload = {
        "meta": meta,
        "document": {
            "id": document.id,
            "name": document.name,
            "characters": len(document.raw_text),
            "clauses": len(document.clauses),
        },
        "risk_counts": counts,
        "clauses": [c.to_dict() for c in sort_by_risk(document.clauses)],
        "conversation": [t.to_dict() for t in conversation],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)
