"""
CORS for browsers calling the API directly.

The web client talks to the API server-side and needs no CORS. Browser code
sends its token in ``auth-token`` or ``Authorization`` and reads a fresh one
from the ``user-token`` response header, so those headers are allowed and
exposed.
"""

from dataclasses import dataclass, field

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

LOCAL_CLIENT_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


@dataclass
class CORSConfig:
    """Cross-origin policy for the API."""

    origins: list[str] = field(default_factory=list)

    # Wildcard origin; credentials are then disabled
    allow_any_origin: bool = False

    methods: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
    request_headers: tuple[str, ...] = (
        "Accept",
        "Content-Type",
        "Authorization",
        "auth-token",
        "X-Request-ID",
    )
    exposed_headers: tuple[str, ...] = ("user-token", "X-Request-ID", "X-Powered-By")

    # Preflight cache lifetime (seconds)
    max_age: int = 3600


def parse_origins(raw: str) -> list[str]:
    """Split a comma-separated origin list, dropping blanks."""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_cors_config(environment: str, extra_origins: str = "") -> CORSConfig:
    """
    CORS policy for an environment.

    Production allows only the configured origins. Every other environment
    also allows the local web client; development allows any origin.
    """
    origins = parse_origins(extra_origins)

    if environment == "production":
        return CORSConfig(origins=origins, max_age=7200)

    return CORSConfig(
        origins=[*LOCAL_CLIENT_ORIGINS, *origins],
        allow_any_origin=environment == "development",
    )


def setup_cors(app: FastAPI, config: CORSConfig) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if config.allow_any_origin else config.origins,
        allow_credentials=not config.allow_any_origin,
        allow_methods=list(config.methods),
        allow_headers=list(config.request_headers),
        expose_headers=list(config.exposed_headers),
        max_age=config.max_age,
    )
