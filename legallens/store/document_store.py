"""Single-slot holder for the live Document and its conversation.

The store is replace-only: a new analysis swaps the whole slot in one
assignment, so readers see either the previous document or the new one, never
a half-classified mix. The conversation belongs to the slot and disappears
with it.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from legallens.utils.errors import NoActiveDocument
from legallens.utils.types import ROLES, ChatTurn, Document


@dataclass
class _Slot:
    document: Optional[Document] = None
    turns: List[ChatTurn] = field(default_factory=list)


class DocumentStore:
    def __init__(self):
        self._slot = _Slot()

    @property
    def document(self) -> Optional[Document]:
        return self._slot.document

    @property
    def conversation(self) -> Tuple[ChatTurn, ...]:
        return tuple(self._slot.turns)

    def replace(self, document: Document) -> None:
        self._slot = _Slot(document=document)

    def clear(self) -> None:
        self._slot = _Slot()

    def add_turn(self, role: str, content: str) -> ChatTurn:
        if role not in ROLES:
            raise ValueError(f"role must be one of {ROLES}, got {role!r}")
        slot = self._slot
        if slot.document is None:
            raise NoActiveDocument("Upload or paste a document before chatting.")
        turn = ChatTurn(role=role, content=content)
        slot.turns.append(turn)
        return turn

    def recent_turns(self, limit: int = 10) -> List[ChatTurn]:
        turns = self._slot.turns
        return list(turns[-limit:]) if limit > 0 else []

    def clear_conversation(self) -> None:
        self._slot = _Slot(document=self._slot.document)
