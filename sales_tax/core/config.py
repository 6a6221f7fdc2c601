import os

from dotenv import load_dotenv

load_dotenv()

class Settings:
    VIES_API_BASE: str = os.getenv(
        "VIES_API_BASE", "https://ec.europa.eu/taxation_customs/vies/rest-api"
    )
    HMRC_API_BASE: str = os.getenv(
        "HMRC_API_BASE", "https://api.service.hmrc.gov.uk"
    )
    HMRC_API_TOKEN: str = os.getenv("HMRC_API_TOKEN", "")
    TAX_VALIDATOR: str = os.getenv("TAX_VALIDATOR", "routing")
    try:
        TAX_VALIDATOR_TIMEOUT: float = float(
            os.getenv("TAX_VALIDATOR_TIMEOUT", "15")
        )
    except ValueError:
        TAX_VALIDATOR_TIMEOUT = 15.0
    COUNTRY_TAX_PATH: str = os.getenv("COUNTRY_TAX_PATH", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
