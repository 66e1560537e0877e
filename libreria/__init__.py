"""
Libreria

Library catalog with a JSON REST API and a server-rendered web client:
- api: FastAPI backend (users, tokens, books)
- auth: token issuing and validation
- storage: SQLAlchemy models and repositories
- web: HTML client consuming the API over HTTP
"""

__version__ = "1.0.0"
