from typing import Dict, Optional

from sales_tax.core.config import settings
from sales_tax.utils.tax_validator.base import (
    TaxNumberValidator,
    ValidationResult,
    ValidationServiceError,
    mask_tax_number,
    normalize_tax_number,
)
from sales_tax.utils.tax_validator.hmrc_validator import HmrcValidator
from sales_tax.utils.tax_validator.routing_validator import RoutingValidator
from sales_tax.utils.tax_validator.vies_validator import ViesValidator

_REGISTRY: Dict[str, TaxNumberValidator] = {}


def register_validator(validator: TaxNumberValidator) -> None:
    _REGISTRY[validator.name] = validator


def get_tax_validator(name: Optional[str] = None) -> TaxNumberValidator:
    name = name or settings.TAX_VALIDATOR
    validator = _REGISTRY.get(name)
    if not validator:
        raise ValidationServiceError(
            f"Unknown tax number validator '{name}'", status_code=500
        )
    return validator


_vies = ViesValidator()
_hmrc = HmrcValidator()

register_validator(_vies)
register_validator(_hmrc)
register_validator(RoutingValidator(default=_vies, routes={"GB": _hmrc}))

__all__ = [
    "HmrcValidator",
    "RoutingValidator",
    "TaxNumberValidator",
    "ValidationResult",
    "ValidationServiceError",
    "ViesValidator",
    "get_tax_validator",
    "mask_tax_number",
    "normalize_tax_number",
    "register_validator",
]
