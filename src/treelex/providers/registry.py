"""Provider registry for recognizer lookup and ordering.

The registry maps provider names and ids to providers and keeps them
sorted by weight (descending, ties broken by name ascending). That order
is computed once, when the registry is built.

Thread Safety:
ProviderRegistry is immutable after creation. Safe to share.
Use ProviderRegistryBuilder for mutable construction. Each tokenizer run
takes a ProviderSet, a private shallow copy of the indices, so removing a
provider during one run never affects another.

Example:
    >>> builder = ProviderRegistryBuilder()
    >>> builder.register(SemicolonProvider())
    >>> builder.register("Arrow", {"condition": "=>", "token_type": TokenType.ARROW_FUNCTION})
    >>> registry = builder.build()
    >>> registry.get("Arrow").weight
    102
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from treelex.errors import ConfigurationError
from treelex.providers.base import Provider
from treelex.tokens import TokenType, token_type_for_name
from treelex.utils.logger import get_logger, trace
from treelex.weights import calculate_weight, sort_key

if TYPE_CHECKING:
    from treelex.providers.protocol import TokenProvider

_module_logger = get_logger(__name__)

# Keys accepted when registering from a mapping
_SPEC_KEYS = frozenset({"condition", "token_type", "weight", "test", "build", "enabled"})

# Synthetic ids are unique per process so shared providers never collide
_next_synthetic_id = sys.maxsize - 1
_synthetic_lock = threading.Lock()


def _as_id(expected: TokenType | int) -> int:
    return expected.value if isinstance(expected, TokenType) else expected


def _synthetic_id(taken: Mapping[int, object]) -> int:
    global _next_synthetic_id
    with _synthetic_lock:
        while _next_synthetic_id in taken:
            _next_synthetic_id -= 1
        provider_id = _next_synthetic_id
        _next_synthetic_id -= 1
    return provider_id


class ProviderRegistry:
    """Immutable registry of providers.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_sorted", "_by_name", "_by_id", "_ids")

    def __init__(
        self,
        sorted_providers: tuple[TokenProvider, ...],
        by_name: dict[str, TokenProvider],
        by_id: dict[int, TokenProvider],
    ) -> None:
        """Initialize registry with pre-built indices.

        Use ProviderRegistryBuilder to create instances.
        """
        self._sorted = sorted_providers
        self._by_name = by_name
        self._by_id = by_id
        self._ids = {provider.name: provider_id for provider_id, provider in by_id.items()}

    def get(self, name: str) -> TokenProvider | None:
        """Get provider by name."""
        return self._by_name.get(name)

    def get_by_id(self, provider_id: TokenType | int) -> TokenProvider | None:
        """Get provider by id (a TokenType resolves to its value)."""
        return self._by_id.get(_as_id(provider_id))

    def id_of(self, name: str) -> int | None:
        """Id assigned to the provider registered under name."""
        return self._ids.get(name)

    def has(self, name: str) -> bool:
        """Check if a provider name is registered."""
        return name in self._by_name

    @property
    def names(self) -> frozenset[str]:
        """All registered provider names."""
        return frozenset(self._by_name)

    @property
    def providers(self) -> tuple[TokenProvider, ...]:
        """All providers, sorted by descending weight then name."""
        return self._sorted

    def provider_set(self, logger: logging.Logger | None = None) -> ProviderSet:
        """Private, mutable copy of the indices for one tokenizer run.

        Args:
            logger: Sink for the run's provider events (default: module logger)
        """
        return ProviderSet(
            list(self._sorted), dict(self._by_name), dict(self._by_id), logger=logger
        )

    def __contains__(self, name: str) -> bool:
        """Support 'name in registry' syntax."""
        return self.has(name)

    def __len__(self) -> int:
        """Number of registered providers."""
        return len(self._by_name)


class ProviderSet:
    """Per-run copy of the registry indices.

    Thread Safety:
        Belongs to exactly one tokenizer run. Not safe to share.
    """

    __slots__ = ("_sorted", "_by_name", "_by_id", "_logger")

    def __init__(
        self,
        sorted_providers: list[TokenProvider],
        by_name: dict[str, TokenProvider],
        by_id: dict[int, TokenProvider],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._sorted = sorted_providers
        self._by_name = by_name
        self._by_id = by_id
        self._logger = logger or _module_logger

    def get(self, name: str) -> TokenProvider | None:
        return self._by_name.get(name)

    def get_by_id(self, provider_id: TokenType | int) -> TokenProvider | None:
        return self._by_id.get(_as_id(provider_id))

    def prepare_pipeline(
        self, expected: Sequence[TokenType | int] = ()
    ) -> list[TokenProvider]:
        """Providers to try for the next token.

        Args:
            expected: Optional allow-list of provider ids or token types.
                When non-empty, exactly these providers are returned, in
                the caller's order; ids no longer present are skipped.

        Returns:
            A new list; callers may extend it freely.
        """
        if not expected:
            return list(self._sorted)

        pipeline = []
        for item in expected:
            provider = self._by_id.get(_as_id(item))
            if provider is None:
                self._logger.debug("Pipeline skips unknown provider id %r", item)
                continue
            pipeline.append(provider)
        return pipeline

    def remove_provider(self, provider: TokenProvider) -> bool:
        """Remove a provider from every index.

        Returns:
            True if the provider was present, False if it was already gone.
        """
        if self._by_name.get(provider.name) is not provider:
            return False

        del self._by_name[provider.name]
        for provider_id, candidate in list(self._by_id.items()):
            if candidate is provider:
                del self._by_id[provider_id]
        self._sorted = [p for p in self._sorted if p is not provider]
        self._logger.debug("Removed provider %s", provider.name)
        return True

    @property
    def providers(self) -> tuple[TokenProvider, ...]:
        return tuple(self._sorted)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


class ProviderRegistryBuilder:
    """Mutable builder for ProviderRegistry.

    Register providers, then call build() to assign ids, compute missing
    weights, and freeze the sorted order.
    """

    __slots__ = ("_providers",)

    def __init__(self) -> None:
        """Initialize empty builder."""
        self._providers: dict[str, TokenProvider] = {}

    def register(
        self,
        provider: TokenProvider | str,
        spec: Mapping[str, Any] | None = None,
    ) -> ProviderRegistryBuilder:
        """Register a provider.

        Args:
            provider: Provider implementing TokenProvider, or a name when
                spec is given
            spec: Mapping with ``condition`` and optionally ``token_type``,
                ``weight``, ``test``, ``build``, ``enabled``

        Returns:
            Self for chaining

        Raises:
            ConfigurationError: If the definition is invalid or the name is
                already registered
        """
        if isinstance(provider, str):
            provider = self._from_spec(provider, spec)
        elif spec is not None:
            raise ConfigurationError("spec is only accepted together with a name")

        for attribute in ("name", "test", "build_token"):
            if not hasattr(provider, attribute):
                msg = f"{type(provider).__name__} missing '{attribute}' attribute"
                raise ConfigurationError(msg)

        name = provider.name
        if name in self._providers:
            existing = self._providers[name]
            msg = f"already registered by {type(existing).__name__}"
            raise ConfigurationError(msg, name)

        if not getattr(provider, "enabled", True):
            _module_logger.debug("Skipping disabled provider %s", name)
            return self

        if getattr(provider, "weight", None) is None:
            provider.weight = calculate_weight(getattr(provider, "condition", None), name)
            trace(
                _module_logger, "Computed provider weight", provider=name, weight=provider.weight
            )

        self._providers[name] = provider
        return self

    def register_all(self, providers: Iterable[TokenProvider]) -> ProviderRegistryBuilder:
        """Register multiple providers."""
        for provider in providers:
            self.register(provider)
        return self

    def unregister(self, name: str) -> bool:
        """Drop a provider by name. Returns False if it was not registered."""
        return self._providers.pop(name, None) is not None

    def build(self) -> ProviderRegistry:
        """Build an immutable registry from the registered providers.

        A provider that already carries an id (from an earlier build) keeps
        it. Otherwise ids prefer the value of the TokenType the provider name
        refers to, and the rest get synthetic ids counting down from
        sys.maxsize - 1, never handing out the same one twice in a process.

        Raises:
            ConfigurationError: If two providers already carry the same id
        """
        by_id: dict[int, TokenProvider] = {}
        unassigned: list[TokenProvider] = []
        pending: list[TokenProvider] = []

        for provider in self._providers.values():
            provider_id = getattr(provider, "id", None)
            if provider_id is None:
                unassigned.append(provider)
                continue
            provider_id = _as_id(provider_id)
            if provider_id in by_id:
                msg = f"id {provider_id} is already used by {by_id[provider_id].name}"
                raise ConfigurationError(msg, provider.name)
            by_id[provider_id] = provider

        for provider in unassigned:
            token_type = token_type_for_name(provider.name)
            if token_type is not None and token_type.value not in by_id:
                by_id[token_type.value] = provider
            else:
                pending.append(provider)

        for provider in pending:
            if token_type_for_name(provider.name) is None:
                _module_logger.debug("Provider %s does not name a token type", provider.name)
            by_id[_synthetic_id(by_id)] = provider

        for provider_id, provider in by_id.items():
            provider.id = provider_id

        sorted_providers = tuple(sorted(self._providers.values(), key=sort_key))
        for provider in sorted_providers:
            _module_logger.debug(
                "Registered provider %s (weight %s)", provider.name, provider.weight
            )

        return ProviderRegistry(
            sorted_providers=sorted_providers,
            by_name=dict(self._providers),
            by_id=by_id,
        )

    @staticmethod
    def _from_spec(name: str, spec: Mapping[str, Any] | None) -> Provider:
        if spec is None:
            raise ConfigurationError("registering by name requires a spec", name)
        unknown = set(spec) - _SPEC_KEYS
        if unknown:
            raise ConfigurationError(f"unknown spec keys {sorted(unknown)}", name)
        return Provider(name, **spec)

    def __contains__(self, name: str) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        """Number of registered providers."""
        return len(self._providers)


def initialize_registry(providers: Iterable[TokenProvider]) -> ProviderRegistry:
    """Validate providers and build a registry in one step."""
    return ProviderRegistryBuilder().register_all(providers).build()


def _default_providers() -> list[TokenProvider]:
    from treelex.providers.builtins import builtin_providers

    return builtin_providers()


# Cached singleton; ProviderRegistry is immutable
_DEFAULT_REGISTRY: ProviderRegistry | None = None


def create_default_registry() -> ProviderRegistry:
    """Get the default registry with every built-in provider (cached).

    Thread Safety:
        Returns a cached immutable registry. Safe for concurrent access.
    """
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = initialize_registry(_default_providers())
    return _DEFAULT_REGISTRY


def create_registry_with_defaults() -> ProviderRegistryBuilder:
    """Create a builder pre-populated with the built-in providers.

    Use this to extend the default set with custom providers:

        >>> builder = create_registry_with_defaults()
        >>> builder.register(MyProvider())
        >>> registry = builder.build()
    """
    return ProviderRegistryBuilder().register_all(_default_providers())
