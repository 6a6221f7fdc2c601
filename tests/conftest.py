import asyncio
from typing import List, Optional, Tuple

import httpx
import pytest

from sales_tax.api.tax_routes import get_tax_resolver
from sales_tax.main import app
from sales_tax.services.rate_table import build_rate_table
from sales_tax.services.tax_service import TaxResolver
from sales_tax.utils.tax_validator import (
    TaxNumberValidator,
    ValidationResult,
    ValidationServiceError,
)


class StubValidator(TaxNumberValidator):
    """Answers every check the same way and remembers what it was asked."""

    name = "stub"

    def __init__(
        self,
        valid: bool = True,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.valid = valid
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []

    async def validate(self, country_code, tax_number):
        self.calls.append((country_code, tax_number))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ValidationResult(
            valid=self.valid, country_code=country_code, tax_number=tax_number
        )


@pytest.fixture
def rate_table():
    return build_rate_table(
        {
            "DE": {"type": "vat", "rate": 0.19},
            "FR": {"type": "vat", "rate": 0.20},
            "GB": {"type": "vat", "rate": 0.20},
            "GR": {"type": "vat", "rate": 0.24},
            "AU": {"type": "gst", "rate": 0.10},
            "HK": {"type": "none", "rate": 0.00},
        }
    )


@pytest.fixture
def valid_validator():
    return StubValidator(valid=True)


@pytest.fixture
def invalid_validator():
    return StubValidator(valid=False)


@pytest.fixture
def failing_validator():
    return StubValidator(error=ValidationServiceError("VIES error 503: unavailable"))


@pytest.fixture
def make_resolver(rate_table):
    def _make(validator):
        return TaxResolver(rate_table=rate_table, validator=validator)

    return _make


@pytest.fixture
def resolver(make_resolver, valid_validator):
    return make_resolver(valid_validator)


@pytest.fixture
def override_resolver():
    def _override(resolver):
        app.dependency_overrides[get_tax_resolver] = lambda: resolver

    yield _override
    app.dependency_overrides.pop(get_tax_resolver, None)


@pytest.fixture
async def async_client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
