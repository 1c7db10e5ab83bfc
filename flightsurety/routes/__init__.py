"""Routes package for API endpoints."""

from .operations_routes import router as operations_router
from .airline_routes import router as airline_router
from .insurance_routes import router as insurance_router
from .oracle_routes import router as oracle_router

__all__ = ["operations_router", "airline_router", "insurance_router", "oracle_router"]
