from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from sales_tax.core.config import settings

logger = logging.getLogger("rate_table")

DEFAULT_COUNTRY_TAX_PATH = (
    Path(__file__).resolve().parent.parent / "resources" / "country_tax.json"
)


class RateTableError(RuntimeError):
    pass


@dataclass(frozen=True)
class RateEntry:
    type: str
    rate: float


# Countries without a known sales tax resolve to this entry.
DEFAULT_RATE_ENTRY = RateEntry(type="none", rate=0.0)


def _parse_entry(country_code: str, raw: Any) -> RateEntry:
    if not isinstance(raw, dict):
        raise RateTableError(f"Entry for '{country_code}' must be an object")

    tax_type = raw.get("type")
    if not isinstance(tax_type, str) or not tax_type:
        raise RateTableError(f"Entry for '{country_code}' is missing a tax type")

    rate = raw.get("rate")
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise RateTableError(f"Entry for '{country_code}' has a non-numeric rate")
    if not 0 <= rate < 1:
        raise RateTableError(
            f"Entry for '{country_code}' has rate {rate} outside of [0, 1)"
        )

    return RateEntry(type=tax_type.lower(), rate=float(rate))


def build_rate_table(raw_table: Mapping[str, Any]) -> Mapping[str, RateEntry]:
    """
    Turn a decoded ``{country_code: {"type", "rate"}}`` mapping into a
    read-only table keyed by uppercase country code.
    """
    table: Dict[str, RateEntry] = {}
    for country_code, raw in raw_table.items():
        code = str(country_code).strip().upper()
        if not code:
            raise RateTableError("Country codes must not be empty")
        table[code] = _parse_entry(code, raw)
    return MappingProxyType(table)


def load_rate_table(
    path: Optional[Union[str, Path]] = None,
) -> Mapping[str, RateEntry]:
    """
    Load the country tax asset. Falls back to COUNTRY_TAX_PATH and then to the
    table shipped with the package.
    """
    source = Path(path or settings.COUNTRY_TAX_PATH or DEFAULT_COUNTRY_TAX_PATH)
    try:
        raw_table = json.loads(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RateTableError(f"Unable to read country tax table {source}: {exc}")
    except json.JSONDecodeError as exc:
        raise RateTableError(f"Country tax table {source} is not valid JSON: {exc}")

    if not isinstance(raw_table, dict):
        raise RateTableError(f"Country tax table {source} must be a JSON object")

    table = build_rate_table(raw_table)
    logger.debug("Loaded %d country tax entries from %s", len(table), source)
    return table


_rate_table: Optional[Mapping[str, RateEntry]] = None


def get_rate_table() -> Mapping[str, RateEntry]:
    global _rate_table
    if _rate_table is None:
        _rate_table = load_rate_table()
    return _rate_table
