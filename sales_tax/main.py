import logging

from fastapi import FastAPI

from sales_tax.api.tax_routes import router as tax_router
from sales_tax.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Sales Tax Service", docs_url="/docs")


@app.get("/")
def root():
    return {"message": "Sales Tax Service Running"}


app.include_router(tax_router)
