"""
Jurisdictions for which a tax number can be checked against a registry.

The EU member states are listed by ISO code. VIES historically identifies
Greece as ``EL``, so both spellings are accepted. The United Kingdom is
checked separately against HMRC.
"""

EU_MEMBER_STATES = frozenset(
    {
        "AT",
        "BE",
        "BG",
        "CY",
        "CZ",
        "DE",
        "DK",
        "EE",
        "ES",
        "FI",
        "FR",
        "GR",
        "HR",
        "HU",
        "IE",
        "IT",
        "LT",
        "LU",
        "LV",
        "MT",
        "NL",
        "PL",
        "PT",
        "RO",
        "SE",
        "SI",
        "SK",
    }
)

VAT_JURISDICTIONS = EU_MEMBER_STATES | {"EL", "GB"}


def is_recognized_jurisdiction(country_code, jurisdictions=VAT_JURISDICTIONS) -> bool:
    return (country_code or "").upper() in jurisdictions
