from __future__ import annotations

import dataclasses
import inspect
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ._errors import describe
from ._metadata import MetadataRegistry, Scope
from ._metadata import registry as default_registry


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


logger = logging.getLogger(__name__)


class ProviderKind(Enum):
    CLASS = "class"
    FACTORY = "factory"
    VALUE = "value"


@dataclass(frozen=True)
class Binding:
    """How a token resolves: a provider of some kind plus a scope.

    A `scope` of None means "whatever the provider declared", filled in when the
    binding enters a `BindingTable`.
    """

    token: Any
    provider: Any
    kind: ProviderKind
    scope: Scope | None = None

    def __post_init__(self) -> None:
        if self.kind is ProviderKind.VALUE:
            if self.scope not in (None, Scope.SINGLETON):
                msg = f"Value binding for {describe(self.token)} cannot be {self.scope.value}-scoped."
                raise ValueError(msg)
            return

        if self.kind is ProviderKind.CLASS and not inspect.isclass(self.provider):
            msg = f"Class provider for {describe(self.token)} must be a class, got {self.provider!r}"
            raise TypeError(msg)

        if not callable(self.provider):
            msg = f"Factory provider for {describe(self.token)} must be callable, got {self.provider!r}"
            raise TypeError(msg)

    @property
    def is_lazy(self) -> bool:
        return self.scope in (Scope.LAZY, Scope.LAZY_UNCACHED)

    @property
    def is_cached(self) -> bool:
        """Whether instances end up in the owning injector's cache."""
        return self.scope in (Scope.SINGLETON, Scope.LAZY)

    def __str__(self) -> str:
        scope = self.scope.value if self.scope else "declared"
        return f"{describe(self.token)} -> {describe(self.provider)} ({self.kind.value}, {scope})"


def bind_class(token: Any, cls: type, *, scope: Scope | None = None) -> Binding:
    return Binding(token, cls, ProviderKind.CLASS, scope)


def bind_factory(token: Any, factory: Callable[..., Any], *, scope: Scope | None = None) -> Binding:
    return Binding(token, factory, ProviderKind.FACTORY, scope)


def bind_value(token: Any, value: object) -> Binding:
    return Binding(token, value, ProviderKind.VALUE, Scope.SINGLETON)


def implicit_binding(token: Any, registry: MetadataRegistry) -> Binding | None:
    """Binding for a token that constructs the token's own definition, if it has one."""
    if inspect.isclass(token):
        return Binding(token, token, ProviderKind.CLASS, registry.scope_of(token))
    if callable(token) and registry.is_declared(token):
        return Binding(token, token, ProviderKind.FACTORY, registry.scope_of(token))
    return None


class BindingTable(Mapping[Any, Binding]):
    """Token -> Binding map of one injector, fixed at construction.

    Override entries may be:
    - a `Binding`
    - a class or function decorated with `provide(token)`
    - a plain class or function, bound to itself.

    When several entries provide the same token, the last one wins.
    """

    def __init__(self, overrides: Iterable[Any] = (), registry: MetadataRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry

        bindings: dict[Any, Binding] = {}
        for entry in overrides:
            binding = self._to_binding(entry)
            if binding.token in bindings:
                logger.debug("Binding %s replaces %s", binding, bindings[binding.token])
            bindings[binding.token] = binding

        self._bindings = MappingProxyType(bindings)
        logger.debug("Built binding table with %d binding(s)", len(bindings))

    def _to_binding(self, entry: Any) -> Binding:
        if isinstance(entry, Binding):
            if entry.scope is None:
                return dataclasses.replace(entry, scope=self._registry.scope_of(entry.provider))
            return entry

        if not callable(entry):
            msg = f"Cannot build a binding from {entry!r}: expected a Binding, a class or a function."
            raise TypeError(msg)

        token = self._registry.provided_token(entry)
        if token is None:
            token = entry
        kind = ProviderKind.CLASS if inspect.isclass(entry) else ProviderKind.FACTORY
        return Binding(token, entry, kind, self._registry.scope_of(entry))

    def __getitem__(self, token: Any) -> Binding:
        return self._bindings[token]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)
