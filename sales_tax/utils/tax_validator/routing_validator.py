from typing import Dict, Optional

from sales_tax.utils.tax_validator.base import TaxNumberValidator, ValidationResult


class RoutingValidator(TaxNumberValidator):
    """Send each country to its own registry, everything else to ``default``."""

    name = "routing"

    def __init__(
        self,
        default: TaxNumberValidator,
        routes: Optional[Dict[str, TaxNumberValidator]] = None,
    ) -> None:
        self.default = default
        self.routes = {code.upper(): v for code, v in (routes or {}).items()}

    def validator_for(self, country_code: str) -> TaxNumberValidator:
        return self.routes.get((country_code or "").upper(), self.default)

    async def validate(self, country_code: str, tax_number: str) -> ValidationResult:
        return await self.validator_for(country_code).validate(country_code, tax_number)
