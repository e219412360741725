import pytest
from legallens.analysis.heuristics import CLAUSE_RULES, classify_locally, match_rule
from legallens.utils.types import CATEGORIES


def test_confidential_information_is_medium_risk():
    clause = classify_locally("The Recipient shall hold all confidential information in strict confidence.")
    assert clause.category == "Confidentiality"
    assert clause.risk_level == "medium"
    assert clause.key_points
    assert clause.risks
    assert clause.risk_details


def test_liability_is_high_risk():
    clause = classify_locally("Indemnification obligations survive this agreement.")
    assert clause.category == "Liability"
    assert clause.risk_level == "high"


def test_first_matching_rule_wins():
    # mentions both payment and termination; payment rule is listed first
    clause = classify_locally("Late payment entitles the vendor to terminate the contract.")
    assert clause.category == "Payment"
    assert [r.category for r in CLAUSE_RULES][:2] == ["Payment", "Termination"]


def test_unmatched_text_is_general_low():
    clause = classify_locally("The headings are for convenience only.")
    assert clause.category == "General"
    assert clause.risk_level == "low"
    assert clause.risk_details is None


def test_fallback_is_deterministic_apart_from_id():
    text = "Licensee may not register any patent derived from the Software."
    a, b = classify_locally(text), classify_locally(text)
    assert a.id != b.id
    assert (a.category, a.risk_level, a.key_points, a.risks, a.explanation) == \
        (b.category, b.risk_level, b.key_points, b.risks, b.explanation)
    assert a.category == "Intellectual Property"


def test_explicit_id_is_kept():
    assert classify_locally("anything", "clause-3").id == "clause-3"


@pytest.mark.parametrize("text", ["", "   ", "§§§ ¶¶", "42", "PAYMENT" * 3])
def test_fallback_always_fully_populated(text):
    clause = classify_locally(text)
    assert clause.category in CATEGORIES
    assert clause.explanation
    assert clause.key_points and clause.risks
    assert clause.original_text == text


def test_match_rule_is_case_insensitive():
    assert match_rule("TERMINATION FOR CAUSE").category == "Termination"
