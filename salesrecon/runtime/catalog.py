"""Runtime loader for the canonical product catalog."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from salesrecon.domain.product import MappingCatalog
from salesrecon.runtime.logging import get_logger
from salesrecon.runtime.paths import get_paths

logger = get_logger(__name__)


def load_product_catalog(
    path: Path | str | None = None,
    *,
    name_column: str = "name",
    code_column: str = "code",
) -> MappingCatalog:
    """
    Load a reference name -> product code catalog from CSV.

    Without ``path`` the project catalog is used, and a missing file yields an
    empty catalog. An explicit path must exist.

    Raises:
        FileNotFoundError: explicit catalog path does not exist
        ValueError: required columns are missing
    """
    if path is None:
        catalog_path = get_paths().product_catalog
        if not catalog_path.exists():
            logger.warning("No product catalog at %s; all products will use report keys", catalog_path)
            return MappingCatalog()
    else:
        catalog_path = Path(path)
        if not catalog_path.exists():
            raise FileNotFoundError(f"Product catalog not found: {catalog_path}")

    df = pd.read_csv(catalog_path, dtype=str, keep_default_na=False)
    missing = [column for column in (name_column, code_column) if column not in df.columns]
    if missing:
        raise ValueError(f"Product catalog {catalog_path} is missing column(s): {', '.join(missing)}")

    entries: dict[str, str] = {}
    for name, code in zip(df[name_column], df[code_column]):
        name = name.strip()
        code = code.strip()
        if not name or not code:
            continue
        if name in entries and entries[name] != code:
            logger.warning("Catalog name %r maps to %r and %r; keeping the last", name, entries[name], code)
        entries[name] = code

    logger.info("Loaded %d catalog entr%s from %s", len(entries), "y" if len(entries) == 1 else "ies", catalog_path)
    return MappingCatalog(entries=entries)
