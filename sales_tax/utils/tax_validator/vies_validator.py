# sales_tax/utils/tax_validator/vies_validator.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from sales_tax.core.config import settings
from sales_tax.utils.tax_validator.base import (
    TaxNumberValidator,
    ValidationResult,
    ValidationServiceError,
    is_well_formed_tax_number,
    mask_tax_number,
    normalize_tax_number,
)

logger = logging.getLogger("tax_validator")

# VIES identifies member states by its own codes.
VIES_COUNTRY_CODES = {"GR": "EL"}

# userError values that still carry a definitive answer in isValid.
_DEFINITIVE_USER_ERRORS = {"VALID", "INVALID"}


class ViesValidator(TaxNumberValidator):
    """
    Async client for the EU VIES REST API.

    VIES answers on behalf of each member state's registry; when a member
    state is unavailable the response is a 200 carrying a ``userError`` code,
    which is surfaced as a ValidationServiceError rather than as invalid.
    """

    name = "vies"

    def __init__(
        self,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = (api_base or settings.VIES_API_BASE).rstrip("/")
        self.timeout = timeout or settings.TAX_VALIDATOR_TIMEOUT
        self._transport = transport

    async def _request(self, path: str, country_code: str) -> Dict[str, Any]:
        url = f"{self.api_base}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise ValidationServiceError(
                f"VIES request failed: {exc}", country_code=country_code
            ) from exc

        if resp.status_code >= 400:
            raise ValidationServiceError(
                f"VIES error {resp.status_code}: {resp.text}",
                country_code=country_code,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ValidationServiceError(
                "VIES returned a non-JSON response", country_code=country_code
            ) from exc
        if not isinstance(payload, dict):
            raise ValidationServiceError(
                "VIES returned an unexpected payload", country_code=country_code
            )
        return payload

    async def validate(self, country_code: str, tax_number: str) -> ValidationResult:
        code = (country_code or "").upper()
        vies_code = VIES_COUNTRY_CODES.get(code, code)
        number = normalize_tax_number(vies_code, tax_number)
        if not is_well_formed_tax_number(number):
            logger.debug("Malformed VAT number for %s; treating as invalid", code)
            return ValidationResult(valid=False, country_code=code, tax_number=number)

        payload = await self._request(
            f"/ms/{vies_code}/vat/{quote(number, safe='')}", code
        )

        user_error = payload.get("userError")
        if user_error and user_error not in _DEFINITIVE_USER_ERRORS:
            logger.warning(
                "VIES could not check VAT number %s for %s: %s",
                mask_tax_number(number),
                code,
                user_error,
            )
            raise ValidationServiceError(
                f"VIES could not check the VAT number: {user_error}",
                country_code=code,
            )

        is_valid = payload.get("isValid")
        if not isinstance(is_valid, bool):
            raise ValidationServiceError(
                "VIES response is missing isValid", country_code=code
            )

        logger.info(
            "VIES checked VAT number %s for %s: valid=%s",
            mask_tax_number(number),
            code,
            is_valid,
        )
        return ValidationResult(
            valid=is_valid,
            country_code=code,
            tax_number=number,
            name=payload.get("name") or None,
            address=payload.get("address") or None,
        )
