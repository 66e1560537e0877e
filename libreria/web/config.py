"""
Web client configuration.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass
class WebSettings:
    """Client settings loaded from environment."""

    # Base URL of the Libreria API, including its route prefix
    api_url: str = "http://localhost:4000/endpoint"
    api_timeout_seconds: float = 10.0

    # Signs the session and user-data cookies
    secret_key: str = "change-me"

    client_host: str = "0.0.0.0"
    client_port: int = 3000

    # Send cookies over HTTPS only
    secure_cookies: bool = False

    debug: bool = True

    @classmethod
    def from_env(cls) -> "WebSettings":
        """Load settings from environment variables."""
        return cls(
            api_url=os.getenv("APIURL", cls.api_url),
            api_timeout_seconds=float(os.getenv("API_TIMEOUT_SECONDS", cls.api_timeout_seconds)),
            secret_key=os.getenv("SECRET_KEY", cls.secret_key),
            client_host=os.getenv("CLIENT_HOST", cls.client_host),
            client_port=int(os.getenv("CLIENT_PORT", cls.client_port)),
            secure_cookies=os.getenv("SECURE_COOKIES", "false").lower() == "true",
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_web_settings() -> WebSettings:
    """Get cached client settings."""
    return WebSettings.from_env()
