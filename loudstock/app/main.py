from fastapi import FastAPI

from loudstock.app.api.v1.router import router as v1_router
from loudstock.app.core.config import settings
from loudstock.app.core.logging_setup import setup_logging

setup_logging(settings)

app = FastAPI(title="LOUD STOCK", version="0.1.0")
app.include_router(v1_router, prefix="/v1")
