"""Application layer - Use cases and orchestration.

Structure:
- commands/: Command dataclasses (write intents)
- dtos/: Result envelopes returned to the presentation layer
- strategies/: Credential strategies and their registry
- services/: AuthEngine (orchestrates every authentication flow)

The application layer orchestrates domain logic but contains no business rules.
"""
