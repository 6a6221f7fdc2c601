from __future__ import annotations

import logging
from typing import AbstractSet, Mapping, Optional

from sales_tax.core.jurisdictions import VAT_JURISDICTIONS, is_recognized_jurisdiction
from sales_tax.schemas.models import AmountResult, TaxContext
from sales_tax.services.rate_table import DEFAULT_RATE_ENTRY, RateEntry, get_rate_table
from sales_tax.utils.tax_validator import (
    TaxNumberValidator,
    ValidationServiceError,
    get_tax_validator,
    mask_tax_number,
)

logger = logging.getLogger("tax_service")


class TaxResolver:
    """
    Resolve the sales tax that applies to a buyer in a given country.

    Bad or missing input never raises: unknown countries have no tax and a
    missing tax number means the buyer is not exempt. The only failure is a
    ValidationServiceError coming from the tax number registry.
    """

    def __init__(
        self,
        rate_table: Optional[Mapping[str, RateEntry]] = None,
        validator: Optional[TaxNumberValidator] = None,
        jurisdictions: AbstractSet[str] = VAT_JURISDICTIONS,
    ) -> None:
        self._rate_table = rate_table
        self._validator = validator
        self.jurisdictions = frozenset(code.upper() for code in jurisdictions)

    @property
    def rate_table(self) -> Mapping[str, RateEntry]:
        if self._rate_table is None:
            return get_rate_table()
        return self._rate_table

    @property
    def validator(self) -> TaxNumberValidator:
        if self._validator is None:
            return get_tax_validator()
        return self._validator

    def has_sales_tax(self, country_code: Optional[str]) -> bool:
        """Whether the country has an entry in the rate table, whatever its rate."""
        country_code = (country_code or "").upper()
        return country_code in self.rate_table

    async def get_sales_tax(
        self, country_code: Optional[str], tax_number: Optional[str] = None
    ) -> TaxContext:
        """
        Return the tax type and the effective rate (0 to 1) for the country.

        The tax number is only checked when there is a tax to be exempt from.
        """
        country_code = (country_code or "").upper()
        tax_number = tax_number or None

        tax = self.rate_table.get(country_code, DEFAULT_RATE_ENTRY)

        if tax.rate > 0:
            exempt = await self.is_tax_exempt(country_code, tax_number)
            return _build_sales_tax_context(tax.type, tax.rate, exempt)

        return _build_sales_tax_context(tax.type, tax.rate, False)

    async def get_amount_with_sales_tax(
        self,
        country_code: Optional[str],
        amount: Optional[float] = None,
        tax_number: Optional[str] = None,
    ) -> AmountResult:
        amount = amount or 0.0
        tax_number = tax_number or None

        tax = await self.get_sales_tax(country_code, tax_number)
        return AmountResult(
            type=tax.type,
            rate=tax.rate,
            exempt=tax.exempt,
            price=amount,
            total=(1.0 + tax.rate) * amount,
        )

    async def validate_tax_number(
        self, country_code: Optional[str], tax_number: Optional[str]
    ) -> bool:
        """
        Check a tax number against the registry of its country.

        Numbers from countries outside the recognized jurisdictions are
        considered invalid without asking any registry.
        """
        country_code = (country_code or "").upper()
        if not is_recognized_jurisdiction(country_code, self.jurisdictions):
            logger.debug(
                "Tax number country %r not recognized; treating as invalid",
                country_code,
            )
            return False

        try:
            result = await self.validator.validate(country_code, tax_number)
        except ValidationServiceError:
            raise
        except Exception as exc:
            raise ValidationServiceError(
                f"Tax number validation failed: {exc}", country_code=country_code
            ) from exc

        logger.debug(
            "Tax number %s for %s validated: %s",
            mask_tax_number(tax_number),
            country_code,
            result.valid,
        )
        return result.valid is True

    async def is_tax_exempt(
        self, country_code: Optional[str], tax_number: Optional[str]
    ) -> bool:
        # Only a valid tax number grants an exemption.
        if not tax_number:
            return False

        is_valid = await self.validate_tax_number(country_code, tax_number)
        return is_valid is True


def _build_sales_tax_context(tax_type: str, tax_rate: float, exempt: bool) -> TaxContext:
    return TaxContext(
        type=tax_type,
        rate=0.0 if exempt is True else tax_rate,
        exempt=exempt,
    )


tax_resolver = TaxResolver()

has_sales_tax = tax_resolver.has_sales_tax
get_sales_tax = tax_resolver.get_sales_tax
get_amount_with_sales_tax = tax_resolver.get_amount_with_sales_tax
validate_tax_number = tax_resolver.validate_tax_number
is_tax_exempt = tax_resolver.is_tax_exempt
