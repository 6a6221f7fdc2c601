from pydantic import BaseModel, ConfigDict, model_validator


class TaxContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    rate: float
    exempt: bool = False

    @model_validator(mode="after")
    def _exempt_has_no_rate(self):
        if self.exempt and self.rate != 0:
            raise ValueError("exempt tax context must have a zero rate")
        return self


class AmountResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    rate: float
    exempt: bool
    price: float
    total: float


class TaxNumberCheck(BaseModel):
    country_code: str
    tax_number: str
    valid: bool


class TaxExemptCheck(BaseModel):
    country_code: str
    tax_number: str
    exempt: bool


class SalesTaxPresence(BaseModel):
    country_code: str
    has_sales_tax: bool
