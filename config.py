"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field

from bjsim.strategy.rules import RuleSet


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class GameConfig:
    """Default table configuration for play sessions."""

    rules: RuleSet = field(default_factory=RuleSet)
    starting_bankroll: float = field(
        default_factory=lambda: float(os.getenv("STARTING_BANKROLL", "1000"))
    )
    default_bet: float = field(
        default_factory=lambda: float(os.getenv("DEFAULT_BET", "10"))
    )


@dataclass(frozen=True)
class SimulationLimits:
    """Upper bounds on simulation requests accepted over HTTP."""

    max_trials: int = field(
        default_factory=lambda: int(os.getenv("SIM_MAX_TRIALS", "10000"))
    )
    max_hands: int = field(
        default_factory=lambda: int(os.getenv("SIM_MAX_HANDS", "10000"))
    )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    session_ttl: int = 3600  # Session timeout in seconds

    game: GameConfig = field(default_factory=GameConfig)
    simulation: SimulationLimits = field(default_factory=SimulationLimits)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
