"""Parsed-report reuse across re-runs of one session."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from salesrecon.domain.report import Origin, RawRecord, ReportSummary
from salesrecon.report.line_parser import DEFAULT_GRAMMAR, ReportGrammar, parse_report
from salesrecon.runtime import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParsedReport:
    records: tuple[RawRecord, ...]
    summary: ReportSummary


class ParsedReportCache:
    """Memoize ``parse_report`` by content hash.

    Re-running a reconciliation (for example with ``override``) must not
    re-parse unchanged files. Parsing is pure, so a hit is always safe.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, Origin, str, int, ReportGrammar], ParsedReport] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def parse(
        self,
        raw_text: str,
        expected_origin: Origin,
        *,
        source_label: str = "",
        source_size: int | None = None,
        grammar: ReportGrammar = DEFAULT_GRAMMAR,
    ) -> ParsedReport:
        digest = hashlib.sha256(raw_text.encode("utf-8", errors="surrogatepass")).hexdigest()
        size = source_size if source_size is not None else len(raw_text)
        key = (digest, expected_origin, source_label, size, grammar)

        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            logger.debug("Parsed report cache hit for %s (%s)", source_label or "<text>", digest[:12])
            return cached

        self.misses += 1
        records, summary = parse_report(
            raw_text,
            expected_origin,
            source_label=source_label,
            source_size=size,
            grammar=grammar,
        )
        parsed = ParsedReport(records=tuple(records), summary=summary)
        self._entries[key] = parsed
        return parsed

    def clear(self) -> None:
        self._entries.clear()
