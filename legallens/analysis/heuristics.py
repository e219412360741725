from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
from legallens.utils.types import Clause, new_id


@dataclass(frozen=True)
class ClauseRule:
    keywords: Tuple[str, ...]
    category: str
    risk_level: str
    key_points: Tuple[str, ...]
    risks: Tuple[str, ...]


# Evaluated top to bottom, first match wins. Order matters: a payment clause that
# also mentions termination is filed under Payment.
CLAUSE_RULES = (
    ClauseRule(("payment", "fee", "cost"), "Payment", "low",
               ("Involves financial obligations",),
               ("Check amounts, due dates and late-payment consequences",)),
    ClauseRule(("termination", "terminate"), "Termination", "low",
               ("Describes how the agreement can be ended",),
               ("Notice periods or termination triggers may be short",)),
    ClauseRule(("confidential", "secret"), "Confidentiality", "medium",
               ("Involves handling of sensitive information",),
               ("May require specific security measures",)),
    ClauseRule(("liability", "indemnification"), "Liability", "high",
               ("Defines legal responsibilities",),
               ("May limit your legal rights",)),
    ClauseRule(("intellectual property", "patent", "copyright"), "Intellectual Property", "medium",
               ("Involves IP rights",),
               ("May affect ownership of work products",)),
)

DEFAULT_RULE = ClauseRule((), "General", "low",
                          ("General contractual provision",),
                          ("Review in the context of the whole agreement",))

ELEVATED_RISK_DETAILS = "This clause may contain important legal obligations. Professional legal review is recommended."


def match_rule(text: str) -> ClauseRule:
    low = text.lower()
    for rule in CLAUSE_RULES:
        if any(kw in low for kw in rule.keywords):
            return rule
    return DEFAULT_RULE


def classify_locally(text: str, clause_id: Optional[str] = None) -> Clause:
    """Deterministic keyword classification used whenever the remote model is unavailable."""
    rule = match_rule(text)
    return Clause(
        id=clause_id or new_id(),
        original_text=text,
        category=rule.category,
        explanation=f"This clause appears to be about {rule.category.lower()}. It's recommended to review this section carefully.",
        risk_level=rule.risk_level,
        risk_details=ELEVATED_RISK_DETAILS if rule.risk_level != "low" else None,
        key_points=rule.key_points,
        risks=rule.risks,
    )
