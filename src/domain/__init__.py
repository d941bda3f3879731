"""Domain layer - Pure business logic.

This layer contains the user record, value objects, the user factory,
domain exceptions and protocols (ports). The domain layer has NO
dependencies on any framework or infrastructure - it is pure Python.

Structure:
- entities/: UserRecord
- value_objects/: Email, Password, UserId, credential variants
- factories/: UserFactory (pure constructors and mutators)
- protocols/: Repository, token and notification interfaces
- errors/: Domain exceptions and client-facing messages
"""
