from __future__ import annotations
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

CATEGORIES = (
    "Termination", "Liability", "Renewal", "Arbitration", "Payment", "Privacy",
    "Intellectual Property", "Confidentiality", "Force Majeure", "Governing Law",
    "Miscellaneous", "General",
)

RISK_LEVELS = ("low", "medium", "high")
# high sorts first
RISK_ORDER = {"high": 0, "medium": 1, "low": 2}

ROLES = ("user", "assistant")

_CATEGORY_KEYS = {c.replace(" ", "").lower(): c for c in CATEGORIES}


def normalize_category(raw: Any) -> Optional[str]:
    """Map free-form model output ("intellectual_property", "IntellectualProperty") onto CATEGORIES.

    Returns None for empty / non-string input; unknown labels become "Miscellaneous".
    """
    if not isinstance(raw, str) or not raw.strip():
        return None
    key = raw.strip().replace(" ", "").replace("_", "").replace("-", "").lower()
    return _CATEGORY_KEYS.get(key, "Miscellaneous")


def normalize_risk_level(raw: Any) -> str:
    if isinstance(raw, str) and raw.strip().lower() in RISK_LEVELS:
        return raw.strip().lower()
    return "low"


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def string_list(value: Any) -> Tuple[str, ...]:
    """Coerce a model or wire value into a tuple of non-empty strings; a bare string is one item."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip())


@dataclass(frozen=True)
class Clause:
    id: str
    original_text: str
    category: str
    explanation: str
    risk_level: str
    risk_details: Optional[str] = None
    key_points: Tuple[str, ...] = ()
    risks: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "originalText": self.original_text,
            "category": self.category,
            "explanation": self.explanation,
            "riskLevel": self.risk_level,
            "keyPoints": list(self.key_points),
            "risks": list(self.risks),
        }
        if self.risk_details:
            out["riskDetails"] = self.risk_details
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Clause":
        return cls(
            id=str(data.get("id") or new_id()),
            original_text=str(data.get("originalText", "")),
            category=normalize_category(data.get("category")) or "General",
            explanation=str(data.get("explanation", "")),
            risk_level=normalize_risk_level(data.get("riskLevel")),
            risk_details=data.get("riskDetails") or None,
            key_points=string_list(data.get("keyPoints")),
            risks=string_list(data.get("risks")),
        )


@dataclass(frozen=True)
class Document:
    id: str
    raw_text: str
    clauses: Tuple[Clause, ...] = ()
    name: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.raw_text,
            "clauses": [c.to_dict() for c in self.clauses],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        return cls(
            id=str(data.get("id") or new_id()),
            raw_text=str(data.get("content", "")),
            clauses=tuple(Clause.from_dict(c) for c in data.get("clauses") or ()),
        )


@dataclass(frozen=True)
class ChatTurn:
    role: str
    content: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content, "timestamp": int(self.timestamp * 1000)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatTurn":
        role = "user" if data.get("role") == "user" else "assistant"
        ts = data.get("timestamp")
        return cls(role=role, content=str(data.get("content", "")),
                   timestamp=float(ts) / 1000 if ts else time.time())

