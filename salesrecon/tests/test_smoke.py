"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import salesrecon
    import salesrecon.application
    import salesrecon.cli.main
    import salesrecon.reconcile
    import salesrecon.report
    import salesrecon.runtime
    import salesrecon.series_access

    assert salesrecon.__version__
    assert salesrecon.application is not None
    assert salesrecon.cli.main is not None
    assert salesrecon.reconcile is not None
    assert salesrecon.report is not None
    assert salesrecon.runtime is not None
    assert salesrecon.series_access is not None


def test_packaged_rules_present() -> None:
    from salesrecon.runtime import get_paths

    assert get_paths().default_reconciliation_rules.is_file()
