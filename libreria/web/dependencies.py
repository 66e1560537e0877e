"""
Dependency providers for the web client.
"""

from fastapi import Request

from .api_client import LibreriaAPIClient


def get_api_client(request: Request) -> LibreriaAPIClient:
    """API client attached to the application at startup."""
    return request.app.state.api_client
