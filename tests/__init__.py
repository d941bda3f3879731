"""Test suite for Authcore.

Test structure follows the test pyramid:
- unit/: Unit tests - domain logic and services with in-process doubles
- integration/: Integration tests - Redis (fakeredis) and SQLAlchemy (aiosqlite)
- api/: API endpoint tests - HTTP endpoints end-to-end via TestClient
"""
