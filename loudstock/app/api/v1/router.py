from fastapi import APIRouter

from loudstock.app.api.v1.endpoints.health import router as health_router
from loudstock.app.api.v1.endpoints.products import router as products_router
from loudstock.app.api.v1.endpoints.reconciliation import router as reconciliation_router
from loudstock.app.api.v1.endpoints.receptions import router as receptions_router
from loudstock.app.api.v1.endpoints.stock_movements import router as stock_movements_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(products_router, tags=["products"])
router.include_router(reconciliation_router, tags=["reconciliation"])
router.include_router(receptions_router, tags=["receptions"])
router.include_router(stock_movements_router, tags=["stock_movements"])
