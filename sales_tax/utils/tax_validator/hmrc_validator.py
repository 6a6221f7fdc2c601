# sales_tax/utils/tax_validator/hmrc_validator.py
from __future__ import annotations

import logging
from typing import Dict, Optional
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


class HmrcValidator(TaxNumberValidator):
    """
    Async client for HMRC's "Check a UK VAT number" API.

    A 404 means HMRC has no record of the number and a 400 means the number
    is malformed; both are a definitive "invalid". Every other non-200 answer
    is a service failure.
    """

    name = "hmrc"

    def __init__(
        self,
        api_base: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = (api_base or settings.HMRC_API_BASE).rstrip("/")
        self.api_token = api_token or settings.HMRC_API_TOKEN
        self.timeout = timeout or settings.TAX_VALIDATOR_TIMEOUT
        self._transport = transport

    @property
    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.hmrc.2.0+json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def validate(self, country_code: str, tax_number: str) -> ValidationResult:
        code = (country_code or "").upper()
        number = normalize_tax_number(code, tax_number)
        if not is_well_formed_tax_number(number):
            return ValidationResult(valid=False, country_code=code, tax_number=number)

        url = (
            f"{self.api_base}/organisations/vat/check-vat-number/lookup/"
            f"{quote(number, safe='')}"
        )
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._headers,
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise ValidationServiceError(
                f"HMRC request failed: {exc}", country_code=code
            ) from exc

        if resp.status_code in (400, 404):
            logger.info(
                "HMRC rejected VAT number %s with %s",
                mask_tax_number(number),
                resp.status_code,
            )
            return ValidationResult(valid=False, country_code=code, tax_number=number)

        if resp.status_code != 200:
            raise ValidationServiceError(
                f"HMRC error {resp.status_code}: {resp.text}", country_code=code
            )

        try:
            target = resp.json().get("target") or {}
        except (ValueError, AttributeError) as exc:
            raise ValidationServiceError(
                "HMRC returned an unexpected payload", country_code=code
            ) from exc

        address = target.get("address") or {}
        address_lines = [
            address.get(key)
            for key in ("line1", "line2", "line3", "line4", "postcode")
            if address.get(key)
        ]

        logger.info("HMRC confirmed VAT number %s", mask_tax_number(number))
        return ValidationResult(
            valid=True,
            country_code=code,
            tax_number=number,
            name=target.get("name"),
            address=", ".join(address_lines) or None,
        )
