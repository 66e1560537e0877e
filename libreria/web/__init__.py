"""
Libreria - Web Client.

Server-rendered pages for browsing and managing the catalog through the API.
"""

from .api_client import APIError, LibreriaAPIClient, LoginResult
from .config import WebSettings, get_web_settings
from .main import app, create_web_app, main

__all__ = [
    "APIError",
    "LibreriaAPIClient",
    "LoginResult",
    "WebSettings",
    "get_web_settings",
    "app",
    "create_web_app",
    "main",
]
