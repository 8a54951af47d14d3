from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

from ._bindings import Binding, BindingTable, ProviderKind, bind_value, implicit_binding
from ._errors import CircularDependencyError, InstantiationError, NoProviderError, describe
from ._metadata import LazyDependency, MetadataRegistry, Scope
from ._metadata import registry as default_registry


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()


class Injector:
    """Resolves tokens into fully wired instances.

    - bindings come from `overrides`, then from the parent chain, then implicitly
      from the token itself (a class, or a function with declared dependencies)
    - singletons are cached by the injector that owns the binding; implicit
      bindings are owned by the root injector
    - a binding's dependencies are resolved through its owning injector
    - child injectors keep only a weak reference to their parent.

    Not thread-safe: concurrent `get()` calls on one injector must be serialized
    by the caller.
    """

    def __init__(
        self,
        overrides: Iterable[Any] = (),
        parent: Injector | None = None,
        *,
        registry: MetadataRegistry | None = None,
    ) -> None:
        if registry is None:
            registry = parent._registry if parent is not None else default_registry  # noqa: SLF001

        self._registry = registry
        self._bindings = BindingTable(overrides, registry)
        self._instances: dict[Any, Any] = {}
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    @property
    def parent(self) -> Injector | None:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def bindings(self) -> BindingTable:
        return self._bindings

    @overload
    def get(self, token: type[T]) -> T: ...

    @overload
    def get(self, token: Any) -> Any: ...

    def get(self, token: Any) -> Any:
        """Resolve `token` to an instance (or to a `Lazy` handle for lazy-scoped bindings).

        Raises:
          NoProviderError: nothing in the chain provides `token`.
          MissingMetadataError: a provider needs arguments but declares no dependencies.
          CircularDependencyError: `token` depends on itself.
          InstantiationError: a provider raised.

        """
        return self._resolve(token, [])

    def create_child(self, overrides: Iterable[Any] = (), *, force_new: Iterable[Any] = ()) -> Injector:
        """Create a child injector that falls back to this one for tokens it does not bind.

        Tokens in `force_new` get a child-local copy of the binding this injector
        would use, so the child builds its own instance instead of sharing ours.
        Explicit `overrides` take precedence over forced copies.

        The child only holds a weak reference to this injector: keep the parent
        alive for as long as the child is used, otherwise lookups that reach it
        raise `ReferenceError`.
        """
        forced = [self._find_binding(token)[1] for token in force_new]
        return Injector([*forced, *overrides], parent=self, registry=self._registry)

    def _resolve(self, token: Any, chain: list[Any]) -> Any:
        if token is Injector:
            return self

        if isinstance(token, LazyDependency):
            owner, binding = self._find_binding(token.token)
            return Lazy(owner, token.token, binding, cached=token.cached)

        owner, binding = self._find_binding(token)
        if binding.is_lazy:
            return Lazy(owner, token, binding, cached=binding.scope is Scope.LAZY)

        if token in chain:
            cycle = [*chain[chain.index(token) :], token]
            logger.warning("Circular dependency detected: %s", " -> ".join(describe(t) for t in cycle))
            raise CircularDependencyError(cycle)

        chain.append(token)
        try:
            return owner._provide(token, binding, chain)  # noqa: SLF001
        finally:
            chain.pop()

    def _find_binding(self, token: Any) -> tuple[Injector, Binding]:
        """Return the owning injector and the effective binding for `token`."""
        try:
            hash(token)
        except TypeError:
            raise NoProviderError(token) from None

        injector = self
        while True:
            binding = injector._bindings.get(token)  # noqa: SLF001
            if binding is not None:
                return injector, binding

            parent = injector._live_parent()  # noqa: SLF001
            if parent is None:
                break
            injector = parent

        binding = implicit_binding(token, injector._registry)  # noqa: SLF001
        if binding is None:
            raise NoProviderError(token)
        return injector, binding

    def _live_parent(self) -> Injector | None:
        if self._parent_ref is None:
            return None

        parent = self._parent_ref()
        if parent is None:
            msg = "The parent of this injector has been garbage-collected."
            raise ReferenceError(msg)
        return parent

    def _provide(self, token: Any, binding: Binding, chain: list[Any]) -> Any:
        if binding.is_cached and token in self._instances:
            logger.debug("Reusing cached instance for %s", describe(token))
            return self._instances[token]

        instance = self._construct(token, binding, chain)
        if binding.is_cached:
            self._instances[token] = instance
        return instance

    def _construct(self, token: Any, binding: Binding, chain: list[Any]) -> Any:
        if binding.kind is ProviderKind.VALUE:
            return binding.provider

        dependencies = self._registry.dependencies_for(binding.provider)
        args = [self._resolve(dependency, chain) for dependency in dependencies]

        logger.debug("Constructing %s", binding)
        try:
            return binding.provider(*args)
        except Exception as exc:
            raise InstantiationError(token, exc) from exc


class Lazy(Generic[T]):
    """Deferred instance of a token, constructed on first `get()`.

    A cached handle constructs once (through the owning injector's cache when
    the binding is cached there). An uncached handle builds a new instance on
    every `get()`.
    """

    def __init__(self, injector: Injector, token: Any, binding: Binding, *, cached: bool = True) -> None:
        self._injector = injector
        self._token = token
        self._binding = binding
        self._cached = cached
        self._value: Any = _UNSET

    @property
    def token(self) -> Any:
        return self._token

    @property
    def cached(self) -> bool:
        return self._cached

    def get(self, local_values: Mapping[Any, Any] | None = None) -> T:
        """Return the instance, constructing it if needed.

        `local_values` maps tokens to values visible only to this construction;
        results built with local values are never cached.
        """
        if local_values:
            return self._construct_with(local_values)

        if not self._cached:
            return self._injector._construct(self._token, self._binding, [self._token])  # noqa: SLF001

        if self._value is _UNSET:
            self._value = self._injector._provide(self._token, self._binding, [self._token])  # noqa: SLF001
        return self._value

    def _construct_with(self, local_values: Mapping[Any, Any]) -> T:
        child = self._injector.create_child(
            [bind_value(token, value) for token, value in local_values.items()],
            force_new=[self._token],
        )
        binding = child.bindings[self._token]
        return child._construct(self._token, binding, [self._token])  # noqa: SLF001

    def __repr__(self) -> str:
        state = "resolved" if self._value is not _UNSET else "pending"
        return f"Lazy({describe(self._token)}, {state})"
