from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class ValidationServiceError(Exception):
    """Raised when a tax number registry cannot give a definitive answer."""

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        country_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.country_code = country_code


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    country_code: str
    tax_number: str
    name: Optional[str] = None
    address: Optional[str] = None


class TaxNumberValidator(ABC):
    name: str = "base"

    @abstractmethod
    async def validate(self, country_code: str, tax_number: str) -> ValidationResult:
        raise NotImplementedError


# Registries accept numbers without the country prefix, and Greece may be
# written either way.
_COUNTRY_PREFIXES = {
    "EL": ("EL", "GR"),
    "GR": ("EL", "GR"),
}

_SEPARATORS = re.compile(r"[\s.\-]+")

# Irish numbers in the old format may contain "+" or "*".
_WELL_FORMED = re.compile(r"[A-Z0-9+*]+")


def normalize_tax_number(country_code: str, tax_number: str) -> str:
    """
    Strip separators and any leading country prefix from a tax number.

    >>> normalize_tax_number("DE", "de 123.456-789")
    '123456789'
    """
    code = (country_code or "").upper()
    number = _SEPARATORS.sub("", tax_number or "").upper()
    for prefix in _COUNTRY_PREFIXES.get(code, (code,)):
        if prefix and number.startswith(prefix):
            return number[len(prefix):]
    return number


def mask_tax_number(tax_number: Optional[str]) -> str:
    if not tax_number:
        return "<none>"
    if len(tax_number) <= 4:
        return "*" * len(tax_number)
    return "*" * (len(tax_number) - 4) + tax_number[-4:]


def is_well_formed_tax_number(number: str) -> bool:
    """Whether a normalized number only uses characters registries issue."""
    return bool(_WELL_FORMED.fullmatch(number or ""))
