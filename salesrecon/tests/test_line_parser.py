from __future__ import annotations

import re
from decimal import Decimal

import pytest

from salesrecon.report.line_parser import ReportGrammar, detect_identity, parse_item_line, parse_report


def test_parse_item_line_fields() -> None:
    record = parse_item_line("101 WIDGET X PREMIUM REFA UNUSED CX 10,000 100,00", line_number=7)

    assert record is not None
    assert record.line_key == "101"
    assert record.description == "WIDGET X PREMIUM"
    assert record.category == "PREMIUM"
    assert record.reference == "REFA"
    assert record.quantity == Decimal("10")
    assert record.total == Decimal("100")
    assert record.line_number == 7
    assert record.quantity_text == "10,000"
    assert record.total_text == "100,00"


@pytest.mark.parametrize(
    "line",
    [
        "",
        "   ",
        "MOVEIS PERARO LTDA",
        "TOTAL DO IPI: 12,34",
        "101 WIDGET REFA UNUSED UN 10,000 100,00",
        "ABC WIDGET X PREMIUM REFA UNUSED CX 10,000 100,00",
        "101 WIDGET X PREMIUM REFA UNUSED CX 10 100,00",
    ],
)
def test_parse_item_line_skips_non_item_lines(line: str) -> None:
    assert parse_item_line(line) is None


def test_parse_report_origin_a(report_a_text: str) -> None:
    records, summary = parse_report(report_a_text, "A", source_label="a.txt")

    assert [record.line_key for record in records] == ["101", "102", "103"]
    assert summary.expected_origin == "A"
    assert summary.detected_identity == "A"
    assert summary.identity_matches
    assert summary.total_quantity == Decimal("13")
    assert summary.total_value == Decimal("450")
    assert summary.total_tax == Decimal("12.34")
    assert summary.period_raw == "01/01/2024 a 31/01/2024"
    assert summary.matched_line_count == 3
    assert summary.rejected_line_count == 4
    assert summary.source_label == "a.txt"
    assert summary.source_size == len(report_a_text)


def test_parse_report_records_identity_independently_of_slot(report_b_text: str) -> None:
    _, summary = parse_report(report_b_text, "A")

    assert summary.detected_identity == "B"
    assert not summary.identity_matches


@pytest.mark.parametrize("text", ["", None])
def test_parse_report_empty_input(text: str | None) -> None:
    records, summary = parse_report(text, "B", source_label="empty.txt")

    assert records == []
    assert summary.total_quantity == Decimal("0")
    assert summary.total_value == Decimal("0")
    assert summary.detected_identity is None
    assert summary.period is None
    assert summary.period_display == "not identified"
    assert summary.period_raw == ""


def test_parse_report_handles_bom_and_crlf() -> None:
    text = "\ufeff101 WIDGET X PREMIUM REFA UNUSED CX 1,000 10,00\r\n102 CADEIRA LEVE REFB UN CX 2,000 20,00\r\n"

    records, summary = parse_report(text, "A")

    assert [record.line_key for record in records] == ["101", "102"]
    assert summary.rejected_line_count == 0
    assert summary.total_value == Decimal("30")


def test_parse_report_explicit_source_size(report_a_text: str) -> None:
    _, summary = parse_report(report_a_text, "A", source_size=4096)
    assert summary.source_size == 4096


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("moveis peraro ltda", "A"),
        ("-*-  SISTEMA  -*-", "B"),
        ("MOVEIS PERARO / -*- SISTEMA -*-", "A"),
        ("ACME", None),
    ],
)
def test_detect_identity(text: str, expected: str | None) -> None:
    assert detect_identity(text) == expected


def test_custom_grammar_markers() -> None:
    grammar = ReportGrammar(origin_a_marker=r"LOJA\s+CENTRO", origin_b_marker=r"LOJA\s+NORTE")
    assert detect_identity("Loja Norte - vendas", grammar) == "B"
    assert detect_identity("MOVEIS PERARO", grammar) is None


def test_grammar_rejects_invalid_settings() -> None:
    with pytest.raises(re.error):
        ReportGrammar(origin_a_marker="(unclosed")
    with pytest.raises(ValueError):
        ReportGrammar(period_header_lines=0)
