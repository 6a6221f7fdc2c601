import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from sales_tax.schemas.models import (
    AmountResult,
    SalesTaxPresence,
    TaxContext,
    TaxExemptCheck,
    TaxNumberCheck,
)
from sales_tax.services.tax_service import TaxResolver, tax_resolver
from sales_tax.utils.tax_validator import ValidationServiceError


router = APIRouter(prefix="/api/tax", tags=["Sales Tax"])
logger = logging.getLogger("tax_routes")


def get_tax_resolver() -> TaxResolver:
    return tax_resolver


def _raise_validation_failure(exc: ValidationServiceError, country_code: str):
    logger.exception("Tax number validation failed for %s", country_code.upper())
    raise HTTPException(status_code=exc.status_code, detail=str(exc))


@router.get("/countries/{country_code}", response_model=SalesTaxPresence)
async def has_sales_tax(
    country_code: str, resolver: TaxResolver = Depends(get_tax_resolver)
):
    return SalesTaxPresence(
        country_code=country_code.upper(),
        has_sales_tax=resolver.has_sales_tax(country_code),
    )


@router.get("/{country_code}", response_model=TaxContext)
async def get_sales_tax(
    country_code: str,
    tax_number: Optional[str] = None,
    resolver: TaxResolver = Depends(get_tax_resolver),
):
    try:
        return await resolver.get_sales_tax(country_code, tax_number)
    except ValidationServiceError as exc:
        _raise_validation_failure(exc, country_code)


@router.get("/{country_code}/amount", response_model=AmountResult)
async def get_amount_with_sales_tax(
    country_code: str,
    amount: float = Query(0.0, ge=0),
    tax_number: Optional[str] = None,
    resolver: TaxResolver = Depends(get_tax_resolver),
):
    try:
        return await resolver.get_amount_with_sales_tax(
            country_code, amount, tax_number
        )
    except ValidationServiceError as exc:
        _raise_validation_failure(exc, country_code)


@router.get("/{country_code}/validate/{tax_number}", response_model=TaxNumberCheck)
async def validate_tax_number(
    country_code: str,
    tax_number: str,
    resolver: TaxResolver = Depends(get_tax_resolver),
):
    try:
        valid = await resolver.validate_tax_number(country_code, tax_number)
    except ValidationServiceError as exc:
        _raise_validation_failure(exc, country_code)
    return TaxNumberCheck(
        country_code=country_code.upper(), tax_number=tax_number, valid=valid
    )


@router.get("/{country_code}/exempt/{tax_number}", response_model=TaxExemptCheck)
async def is_tax_exempt(
    country_code: str,
    tax_number: str,
    resolver: TaxResolver = Depends(get_tax_resolver),
):
    try:
        exempt = await resolver.is_tax_exempt(country_code, tax_number)
    except ValidationServiceError as exc:
        _raise_validation_failure(exc, country_code)
    return TaxExemptCheck(
        country_code=country_code.upper(), tax_number=tax_number, exempt=exempt
    )
