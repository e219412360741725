from __future__ import annotations
import logging
from pathlib import Path
from typing import Sequence
from legallens.utils.config import AppConfig
from legallens.utils.errors import RemoteChatFailure
from legallens.utils.types import ChatTurn, Document
from legallens.llm.gemini import get_llm

logger = logging.getLogger(__name__)

PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"
with open(PROMPT_DIR / "chat_system.txt", "r", encoding="utf-8") as f:
    CHAT_SYSTEM_TEMPLATE = f.read()
with open(PROMPT_DIR / "question.txt", "r", encoding="utf-8") as f:
    QUESTION_TEMPLATE = f.read()

CHAT_FALLBACK = "I apologize, but I'm having trouble processing your request right now. Please try again in a moment."


def build_clause_context(document: Document) -> str:
    blocks = []
    for clause in document.clauses:
        blocks.append(
            f"- {clause.category}: {clause.explanation}\n"
            f"  Original text: \"{clause.original_text}\"\n"
            f"  Key points: {', '.join(clause.key_points) or 'N/A'}\n"
            f"  Risks: {', '.join(clause.risks) or 'None'}"
        )
    return CHAT_SYSTEM_TEMPLATE.format(clauses="\n\n".join(blocks) or "(no clauses were identified)")


def offline_answer(question: str) -> str:
    q = question.lower()
    if "what is this document" in q:
        return ("This appears to be a legal document. I'm currently operating without AI capabilities, "
                "but I can help you understand its basic structure from the clause breakdown.")
    if "summary" in q:
        return ("I can identify the different sections of this document, but for a detailed summary "
                "the Gemini integration needs to be enabled.")
    return ("I'm currently running without AI capabilities. To get detailed answers about specific clauses, "
            "set GOOGLE_API_KEY to enable the Gemini integration.")


class ChatAssistant:
    def __init__(self, config: AppConfig, llm=None):
        self.config = config
        self.llm = llm if llm is not None else get_llm(config)

    def _messages(self, question: str, history: Sequence[ChatTurn]):
        limit = self.config.chat_history_limit
        recent = list(history)[-limit:] if limit > 0 else []
        # Gemini expects the conversation to open with a user turn
        while recent and recent[0].role != "user":
            recent.pop(0)
        messages = [{"role": t.role, "content": t.content} for t in recent]
        messages.append({"role": "user", "content": question})
        return messages

    def reply(self, question: str, document: Document, history: Sequence[ChatTurn] = ()) -> str:
        """Answer a chat message grounded in the document's clauses. Never raises."""
        try:
            if self.llm is None:
                raise RemoteChatFailure("no remote model configured")
            try:
                answer = self.llm.chat(build_clause_context(document), self._messages(question, history))
            except Exception as e:
                raise RemoteChatFailure(str(e)) from e
            if not answer or not answer.strip():
                raise RemoteChatFailure("empty response")
            return answer.strip()
        except RemoteChatFailure as e:
            logger.warning("Chat model call failed, returning fallback: %s", e)
            return CHAT_FALLBACK

    def answer(self, question: str, document: Document) -> str:
        """Single-shot question over the raw document text (no conversation)."""
        if self.llm is None:
            return offline_answer(question)
        prompt = QUESTION_TEMPLATE.format(document=document.raw_text, question=question)
        try:
            answer = self.llm.generate(prompt)
        except Exception as e:
            logger.warning("Question model call failed, using offline answer: %s", e)
            return offline_answer(question)
        return answer.strip() if answer and answer.strip() else offline_answer(question)
