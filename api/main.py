"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import play, simulation, strategy
from config import config

logging.basicConfig(level=config.log_level)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Reject rule combinations the core refuses to build."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app = FastAPI(
    title="Blackjack Simulator",
    description="Basic-strategy blackjack rounds and Monte-Carlo bankroll statistics",
    version="0.1.0",
    debug=config.debug,
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ValueError, _value_error_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(strategy.router, prefix="/api", tags=["strategy"])
app.include_router(simulation.router, prefix="/api/simulate", tags=["simulation"])
app.include_router(play.router, prefix="/api/play", tags=["play"])
