"""Presentation layer - API endpoints and HTTP concerns.

This layer contains FastAPI routers. It is thin: it builds commands,
dispatches them to AuthEngine and translates result envelopes to HTTP
responses.

Structure:
- routers/auth.py: authentication and token endpoints
- routers/system.py: root and health endpoints
- routers/errors/: error responses and global exception handlers

The presentation layer depends on the application layer but contains NO
business logic.
"""
