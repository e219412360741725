from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional
from legallens.utils.types import RISK_ORDER, Clause, Document

SEPARATOR = "=" * 50
REPORT_TITLE = "LegalLens Document Analysis"


def sort_by_risk(clauses: Iterable[Clause]) -> List[Clause]:
    """High first, then medium, then low; document order is kept within a level."""
    return sorted(clauses, key=lambda c: RISK_ORDER.get(c.risk_level, len(RISK_ORDER)))


def render_clause(clause: Clause) -> str:
    key_points = "\n".join(f"• {p}" for p in clause.key_points)
    risks = "\n".join(f"⚠ {r}" for r in clause.risks)
    details = f"Risk Details: {clause.risk_details}" if clause.risk_details else ""
    return (
        f"{clause.category} ({clause.risk_level.upper()} RISK)\n"
        f"{clause.explanation}\n\n"
        f"Key Points:\n{key_points}\n\n"
        f"Risks:\n{risks}\n\n"
        f"{details}\n"
        f"{SEPARATOR}"
    )


def render_clause_analysis(clauses: Iterable[Clause]) -> str:
    return "\n\n".join(render_clause(c) for c in sort_by_risk(clauses))


def build_analysis_text(document: Document, generated_on: Optional[date] = None) -> str:
    generated_on = generated_on or date.today()
    elevated = sum(1 for c in document.clauses if c.risk_level in ("high", "medium"))
    low = sum(1 for c in document.clauses if c.risk_level == "low")
    return (
        f"{REPORT_TITLE}\n"
        f"Generated on: {generated_on.isoformat()}\n\n"
        f"SUMMARY:\n"
        f"- Total Clauses: {len(document.clauses)}\n"
        f"- High/Medium Risks: {elevated}\n"
        f"- Low Risk: {low}\n\n"
        f"DETAILED ANALYSIS:\n"
        f"{render_clause_analysis(document.clauses)}"
    )


def export_filename(generated_on: Optional[date] = None) -> str:
    return f"legal-analysis-{(generated_on or date.today()).isoformat()}.txt"
