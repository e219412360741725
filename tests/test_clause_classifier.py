import json
import random
import threading
import time

from legallens.analysis.clauses import BATCH_DELIMITER, ClauseClassifier
from legallens.utils.config import AppConfig


def clause_text_from(prompt: str) -> str:
    return prompt.split("Clause text: ", 1)[1].split("\n", 1)[0]


def payload(meaning: str, category: str = "Termination", level: str = "high") -> dict:
    return {"category": category, "simpleMeaning": meaning, "keyPoints": ["kp"],
            "risks": ["r"], "riskLevel": level, "riskExplanation": "why"}


class EchoLLM:
    """Answers with the clause text as its meaning, after a random delay."""

    def generate(self, prompt: str) -> str:
        time.sleep(random.uniform(0, 0.02))
        return "Here you go: " + json.dumps(payload(f"meaning of {clause_text_from(prompt)}"))


class FailingLLM:
    def generate(self, prompt: str) -> str:
        raise ConnectionError("network down")


class GarbageLLM:
    def generate(self, prompt: str) -> str:
        return "I'm sorry, I cannot help with that."


class BlockingLLM:
    def __init__(self):
        self.release = threading.Event()

    def generate(self, prompt: str) -> str:
        self.release.wait(5)
        return json.dumps(payload("too late"))


class BatchLLM:
    def __init__(self, drop_last=False):
        self.drop_last = drop_last
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        body = prompt.split("Clauses:\n", 1)[1].split("\n\nEach object", 1)[0]
        parts = body.split(BATCH_DELIMITER)
        if self.drop_last:
            parts = parts[:-1]
        return json.dumps([payload(f"meaning of {p}", "Payment", "low") for p in parts])


def make(llm, **overrides):
    config = AppConfig(use_gemini=False, **overrides)
    return ClauseClassifier(config, llm=llm)


def test_remote_result_becomes_clause():
    clause = make(EchoLLM()).classify("Either party may terminate.", "clause-1")
    assert clause.id == "clause-1"
    assert clause.category == "Termination"
    assert clause.explanation == "meaning of Either party may terminate."
    assert clause.risk_level == "high"
    assert clause.risk_details == "why"
    assert clause.original_text == "Either party may terminate."


def test_network_failure_falls_back_locally():
    clause = make(FailingLLM()).classify("All confidential information stays secret.")
    assert clause.category == "Confidentiality"
    assert clause.risk_level == "medium"
    assert clause.key_points and clause.risks


def test_unparsable_response_falls_back_locally():
    clause = make(GarbageLLM()).classify("The liability of the vendor is capped.")
    assert clause.category == "Liability"
    assert clause.risk_level == "high"


def test_no_model_uses_local_rules():
    classifier = make(None)
    assert classifier.llm is None
    assert classifier.classify("Fees are payable monthly.").category == "Payment"


def test_sections_keep_submission_order():
    sections = [f"section number {i}" for i in range(12)]
    clauses = make(EchoLLM(), max_workers=4).classify_sections(sections)
    assert [c.original_text for c in clauses] == sections
    assert [c.explanation for c in clauses] == [f"meaning of {s}" for s in sections]
    assert [c.id for c in clauses] == [f"clause-{i}" for i in range(1, 13)]


def test_empty_section_list():
    assert make(EchoLLM()).classify_sections([]) == []


def test_hanging_calls_time_out_to_fallback():
    llm = BlockingLLM()
    classifier = make(llm, request_timeout=0.05, max_workers=2)
    try:
        clauses = classifier.classify_sections(["Payment is due.", "Terminate anytime."])
    finally:
        llm.release.set()
    assert [c.category for c in clauses] == ["Payment", "Termination"]
    assert [c.id for c in clauses] == ["clause-1", "clause-2"]


def test_batched_classification_keeps_positions():
    llm = BatchLLM()
    sections = ["alpha clause", "beta clause", "gamma clause", "delta clause", "epsilon clause"]
    clauses = make(llm, classify_batch_size=2).classify_sections(sections)
    assert len(llm.prompts) == 3
    assert [c.explanation for c in clauses] == [f"meaning of {s}" for s in sections]
    assert [c.id for c in clauses] == [f"clause-{i}" for i in range(1, 6)]


def test_batch_count_mismatch_falls_back_for_batch():
    clauses = make(BatchLLM(drop_last=True)).classify_batch(["Fees due.", "Confidential data."])
    assert [c.category for c in clauses] == ["Payment", "Confidentiality"]
    assert all(c.explanation.startswith("This clause appears to be about") for c in clauses)
