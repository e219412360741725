from __future__ import annotations
from typing import List
import re

# Common legal section header terms. Substring match on purpose: "term" also hits "terminate".
SECTION_HEADERS = [
    "definitions",
    "term",
    "termination",
    "payment",
    "confidentiality",
    "intellectual property",
    "liability",
    "indemnification",
    "warranties",
    "governing law",
    "dispute resolution",
    "force majeure",
    "assignment",
    "notices",
    "entire agreement",
    "amendment",
    "severability",
    "waiver",
]

HEADER_MAX_CHARS = 100

BLANK_LINE_RE = re.compile(r"\n\s*\n")
NUMBERED_RE = re.compile(r"^\d[\d.]*\s+")
LETTERED_RE = re.compile(r"^[a-z][.)]\s+", re.I)

MULTI_NEWLINE_RE = re.compile(r"(?:\r?\n){2,}")
STRUCTURAL_MARKER_RE = re.compile(r"^[\d.]+|^[A-Z][).]|^SECTION|^Article", re.I)

STRATEGIES = ("paragraph", "structural")


def is_boundary_marker(paragraph: str) -> bool:
    """True when a paragraph opens a new clause: list numbering or a short header line."""
    if NUMBERED_RE.match(paragraph) or LETTERED_RE.match(paragraph):
        return True
    if len(paragraph) >= HEADER_MAX_CHARS:
        return False
    normalized = " ".join(paragraph.lower().split())
    return any(header in normalized for header in SECTION_HEADERS)


def split_sections(text: str) -> List[str]:
    """Partition raw document text into candidate clause texts (paragraph + heading heuristic).

    Paragraphs are separated by blank lines. A boundary-marker paragraph closes the
    running section and opens a new one; any other paragraph continues the running
    section. Never raises: degenerate input gives [] or a single section.
    """
    if not text or not text.strip():
        return []
    paragraphs = [p.strip() for p in BLANK_LINE_RE.split(text) if p.strip()]
    sections: List[str] = []
    current = ""
    for paragraph in paragraphs:
        if is_boundary_marker(paragraph):
            if current:
                sections.append(current.strip())
            current = paragraph
        else:
            current = f"{current}\n\n{paragraph}" if current else paragraph
    if current:
        sections.append(current.strip())
    return sections


def split_structural(text: str) -> List[str]:
    """Structural split with continuation merging.

    Sections come from runs of two or more newlines. A section without a leading
    number / letter / SECTION / Article marker is glued onto the previous one when
    that one does not end with a period (it reads as a sentence cut mid-way).
    """
    if not text or not text.strip():
        return []
    raw = [s.strip() for s in MULTI_NEWLINE_RE.split(text) if s.strip()]
    merged: List[str] = []
    for section in raw:
        continuation = (
            merged
            and not STRUCTURAL_MARKER_RE.match(section)
            and not merged[-1].endswith(".")
        )
        if continuation:
            merged[-1] = f"{merged[-1]}\n{section}"
        else:
            merged.append(section)
    return merged


def split(text: str, strategy: str = "paragraph") -> List[str]:
    if strategy == "structural":
        return split_structural(text)
    if strategy != "paragraph":
        raise ValueError(f"Unknown splitter strategy: {strategy!r} (expected one of {STRATEGIES})")
    return split_sections(text)
