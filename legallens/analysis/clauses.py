from __future__ import annotations
import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout
from pathlib import Path
from typing import List, Optional, Sequence
from legallens.utils.config import AppConfig
from legallens.utils.errors import RemoteClassificationFailure
from legallens.utils.types import CATEGORIES, Clause, new_id
from legallens.llm.gemini import get_llm
from legallens.analysis.heuristics import classify_locally
from legallens.analysis.parsing import ParsedClause, ParseFailure, parse_batch_response, parse_clause_response

logger = logging.getLogger(__name__)

PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"
with open(PROMPT_DIR / "clause.txt", "r", encoding="utf-8") as f:
    CLAUSE_TEMPLATE = f.read()
with open(PROMPT_DIR / "clause_batch.txt", "r", encoding="utf-8") as f:
    CLAUSE_BATCH_TEMPLATE = f.read()

BATCH_DELIMITER = "\n\n---\n\n"
# sent to the model as the allowed values of "category"
CATEGORY_CHOICES = "|".join(c for c in CATEGORIES if c != "General")


def _to_clause(text: str, parsed: ParsedClause, clause_id: Optional[str]) -> Clause:
    return Clause(
        id=clause_id or new_id(),
        original_text=text,
        category=parsed.category,
        explanation=parsed.explanation,
        risk_level=parsed.risk_level,
        risk_details=parsed.risk_details,
        key_points=parsed.key_points,
        risks=parsed.risks,
    )


class ClauseClassifier:
    def __init__(self, config: AppConfig, llm=None):
        """`llm` is anything with `generate(prompt) -> str`; tests inject stubs here.

        Without one, the Gemini client is built from config; if that is disabled or
        unconfigured every clause goes through the local keyword rules.
        """
        self.config = config
        self.llm = llm if llm is not None else get_llm(config)

    def _remote(self, prompt: str) -> str:
        if self.llm is None:
            raise RemoteClassificationFailure("no remote model configured")
        try:
            return self.llm.generate(prompt)
        except Exception as e:
            raise RemoteClassificationFailure(str(e)) from e

    def classify(self, text: str, clause_id: Optional[str] = None) -> Clause:
        """Classify one clause; never raises."""
        if self.llm is None:
            return classify_locally(text, clause_id)
        try:
            raw = self._remote(CLAUSE_TEMPLATE.format(text=text, categories=CATEGORY_CHOICES))
        except RemoteClassificationFailure as e:
            logger.warning("Remote classification failed, using keyword fallback: %s", e)
            return classify_locally(text, clause_id)
        result = parse_clause_response(raw)
        if isinstance(result, ParseFailure):
            logger.warning("Unparsable classification (%s), using keyword fallback", result.reason)
            return classify_locally(text, clause_id)
        return _to_clause(text, result, clause_id)

    def classify_batch(self, texts: Sequence[str], clause_ids: Optional[Sequence[str]] = None) -> List[Clause]:
        """Classify several clauses with one remote call; positions line up with `texts`."""
        ids = list(clause_ids) if clause_ids else [None] * len(texts)
        if self.llm is None or not texts:
            return [classify_locally(t, i) for t, i in zip(texts, ids)]
        prompt = CLAUSE_BATCH_TEMPLATE.format(
            text=BATCH_DELIMITER.join(texts), count=len(texts), categories=CATEGORY_CHOICES
        )
        try:
            raw = self._remote(prompt)
        except RemoteClassificationFailure as e:
            logger.warning("Remote batch classification failed, using keyword fallback: %s", e)
            return [classify_locally(t, i) for t, i in zip(texts, ids)]
        out: List[Clause] = []
        for text, cid, result in zip(texts, ids, parse_batch_response(raw, len(texts))):
            if isinstance(result, ParseFailure):
                logger.warning("Batch item unparsable (%s), using keyword fallback", result.reason)
                out.append(classify_locally(text, cid))
            else:
                out.append(_to_clause(text, result, cid))
        return out

    def classify_sections(self, sections: Sequence[str]) -> List[Clause]:
        """Classify every section concurrently and join in submission order.

        Clause ids are positional ("clause-1", ...). Sections whose call has not
        finished by the overall deadline are classified locally.
        """
        sections = list(sections)
        if not sections:
            return []
        ids = [f"clause-{n}" for n in range(1, len(sections) + 1)]
        size = max(1, self.config.classify_batch_size)
        groups = [(sections[i:i + size], ids[i:i + size]) for i in range(0, len(sections), size)]

        pool = ThreadPoolExecutor(max_workers=self.config.max_workers, thread_name_prefix="classify")
        try:
            if size == 1:
                futures = [pool.submit(self.classify, texts[0], cids[0]) for texts, cids in groups]
            else:
                futures = [pool.submit(self.classify_batch, texts, cids) for texts, cids in groups]
            # every call carries its own request timeout; allow one extra round for queued work
            rounds = -(-len(groups) // self.config.max_workers) + 1
            deadline = time.monotonic() + self.config.request_timeout * rounds
            clauses: List[Clause] = []
            for (texts, cids), fut in zip(groups, futures):
                try:
                    got = fut.result(timeout=max(0.0, deadline - time.monotonic()))
                except FuturesTimeout:
                    logger.warning("Classification timed out for %s, using keyword fallback", ", ".join(cids))
                    got = [classify_locally(t, i) for t, i in zip(texts, cids)]
                clauses.extend(got if isinstance(got, list) else [got])
            return clauses
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
