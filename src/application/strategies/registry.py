"""Credential strategy registry.

Strategies are consulted in registration order; the first enabled strategy
accepting the credential tag wins.
"""

from collections.abc import Iterable, Iterator

from src.domain.enums import CredentialType
from src.domain.protocols.credential_strategy_protocol import (
    CredentialStrategyProtocol,
)


class StrategyRegistry:
    """Ordered collection of credential strategies.

    Example:
        >>> registry = StrategyRegistry([UsernamePasswordStrategy(repo, hasher)])
        >>> registry.resolve(CredentialType.USERNAME_PASSWORD)
        <UsernamePasswordStrategy ...>
        >>> registry.resolve(CredentialType.EMAIL_PASSWORD) is None
        True
    """

    def __init__(self, strategies: Iterable[CredentialStrategyProtocol] = ()) -> None:
        self._strategies: list[CredentialStrategyProtocol] = list(strategies)

    def register(self, strategy: CredentialStrategyProtocol) -> None:
        self._strategies.append(strategy)

    def resolve(
        self, credential_type: CredentialType
    ) -> CredentialStrategyProtocol | None:
        for strategy in self._strategies:
            if strategy.is_enabled and strategy.accepts(credential_type):
                return strategy
        return None

    def __iter__(self) -> Iterator[CredentialStrategyProtocol]:
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)
