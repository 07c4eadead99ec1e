"""Shared pytest fixtures for salesrecon tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from salesrecon.runtime import reset_paths, reset_rule_cache

REPORT_A = """\
MOVEIS PERARO LTDA
Relatorio de Vendas por Produto
Período de 01/01/2024 a 31/01/2024

101 WIDGET X PREMIUM REFA UNUSED CX 10,000 100,00
102 CADEIRA LEVE REFB UN CX 2,000 50,00
103 MESA NOBRE REFC UN CX 1,000 300,00
TOTAL DO IPI: 12,34
"""

REPORT_B = """\
-*- SISTEMA -*-
Período de 01/01/2024 a 31/01/2024
101 WIDGET X PREMIUM REFA UNUSED CX 10,000 100,00
102 CADEIRA LEVE REFB UN CX 2,000 50,00
104 SOFA ULTRA REFD UN CX 3,000 90,00
VALOR DO IPI: 1,00
"""


@pytest.fixture(autouse=True)
def isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point project paths at an empty temporary root for every test."""
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.delenv("SALESRECON_STORE_URL", raising=False)
    reset_paths(root)
    reset_rule_cache()
    yield root
    reset_rule_cache()
    reset_paths()


@pytest.fixture
def report_files(tmp_path: Path) -> tuple[Path, Path]:
    """Both sample reports written as ISO-8859-1 files."""
    path_a = tmp_path / "origin_a.txt"
    path_b = tmp_path / "origin_b.txt"
    path_a.write_bytes(REPORT_A.encode("iso-8859-1"))
    path_b.write_bytes(REPORT_B.encode("iso-8859-1"))
    return path_a, path_b


@pytest.fixture
def report_a_text() -> str:
    return REPORT_A


@pytest.fixture
def report_b_text() -> str:
    return REPORT_B
