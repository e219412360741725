from __future__ import annotations
import logging
from typing import List, Optional
from legallens.utils.config import AppConfig
from legallens.utils.types import Document, new_id
from legallens.ingest.pdf_loader import load_pasted_text, load_upload
from legallens.ingest.splitter import split
from legallens.analysis.clauses import BATCH_DELIMITER, ClauseClassifier

logger = logging.getLogger(__name__)


def sections_from_content(content: str, strategy: str = "paragraph") -> List[str]:
    """Sections for a classify request: delimiter-joined batches are taken as already split."""
    if BATCH_DELIMITER in content:
        return [s.strip() for s in content.split(BATCH_DELIMITER) if s.strip()]
    return split(content, strategy)


def analyze_text(config: AppConfig, text: str, classifier: Optional[ClauseClassifier] = None,
                 name: Optional[str] = None) -> Document:
    """Split and classify already-extracted text into a new Document.

    The Document is built only after every section has a result, so callers can
    publish it in one step.
    """
    classifier = classifier or ClauseClassifier(config)
    sections = split(text, config.splitter_strategy)
    logger.info("Split %s into %d section(s)", name or "text", len(sections))
    clauses = classifier.classify_sections(sections)
    return Document(id=new_id(), raw_text=text, clauses=tuple(clauses), name=name)


def analyze_upload(config: AppConfig, name: str, data: bytes, content_type: Optional[str] = None,
                   classifier: Optional[ClauseClassifier] = None) -> Document:
    text = load_upload(name, data, content_type, max_bytes=config.max_upload_bytes)
    return analyze_text(config, text, classifier, name=name)


def analyze_pasted(config: AppConfig, text: str, classifier: Optional[ClauseClassifier] = None) -> Document:
    text = load_pasted_text(text, max_bytes=config.max_upload_bytes)
    return analyze_text(config, text, classifier, name="Pasted text")
