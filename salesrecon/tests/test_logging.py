from __future__ import annotations

import logging

from salesrecon.runtime import get_logger, set_log_level


def test_get_logger_stays_in_namespace() -> None:
    assert get_logger("salesrecon.report.numeral").name == "salesrecon.report.numeral"
    assert get_logger("helpers").name == "salesrecon.helpers"


def test_set_log_level_switches_format() -> None:
    root = logging.getLogger("salesrecon")
    try:
        set_log_level(logging.DEBUG)
        assert root.level == logging.DEBUG
        assert root.handlers
        assert all("%(lineno)d" in handler.formatter._fmt for handler in root.handlers)

        set_log_level(logging.WARNING)
        assert root.level == logging.WARNING
        assert all("%(lineno)d" not in handler.formatter._fmt for handler in root.handlers)
    finally:
        set_log_level(logging.INFO)
