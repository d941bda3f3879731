"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- Database repositories
- Token stores (Redis, in-memory)
- Password hashing and JWT issue/validation
- Email notifications

Structure:
- persistence/: SQLAlchemy models, database and user repositories
- cache/: Token store adapters
- security/: bcrypt hasher, JWT token service
- email/: Notification service and email transports
- logging/: structlog console adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
