"""FastAPI main application exposing the FlightSurety contract."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Config
from .errors import (
    AlreadyExists,
    ContractPaused,
    DuplicateVote,
    FlightSuretyError,
    InsufficientFunds,
    InvalidAddress,
    InvalidState,
    NoBalance,
    ReentrancyRejected,
    StaleOrUnmatchedResponse,
    Unauthorized,
)
from .logger import configure_logging
from .routes import airline_router, insurance_router, operations_router, oracle_router
from .services.singleton import get_contract_service

config = Config()
configure_logging(config.LOG_LEVEL, config.LOG_FILE)
logger = logging.getLogger(__name__)

# Most specific class wins; looked up along the exception's MRO
ERROR_STATUS_CODES = {
    Unauthorized: 403,
    InvalidAddress: 400,
    InvalidState: 400,
    NoBalance: 400,
    InsufficientFunds: 402,
    AlreadyExists: 409,
    DuplicateVote: 409,
    ReentrancyRejected: 409,
    StaleOrUnmatchedResponse: 409,
    ContractPaused: 503,
    FlightSuretyError: 400,
}


def status_code_for(exc: FlightSuretyError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    service = get_contract_service()
    service.start()
    try:
        yield
    finally:
        service.stop()


# Initialize FastAPI app
app = FastAPI(title="FlightSurety API", version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FlightSuretyError)
async def contract_error_handler(request: Request, exc: FlightSuretyError):
    """Surface contract call failures to the caller with their error code."""
    status_code = status_code_for(exc)
    logger.info(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code, "details": exc.details},
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "FlightSurety API", "status": "running"}


@app.get("/health")
async def health():
    """Simple health check endpoint."""
    return {"status": "ok"}


app.include_router(operations_router)
app.include_router(airline_router)
app.include_router(insurance_router)
app.include_router(oracle_router)


def run_server() -> None:
    """Run the API server with uvicorn."""
    import uvicorn
    logger.info(f"Starting FlightSurety on http://{config.API_HOST}:{config.API_PORT}")
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    run_server()
