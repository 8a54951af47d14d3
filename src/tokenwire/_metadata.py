from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from ._errors import MissingMetadataError, describe


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    C = TypeVar("C", bound=Callable[..., Any])


logger = logging.getLogger(__name__)


class Scope(Enum):
    SINGLETON = "singleton"
    TRANSIENT = "transient"
    LAZY = "lazy"
    LAZY_UNCACHED = "lazy_uncached"


class Token:
    """An explicit, named token.

    Tokens compare by identity: two ``Token("db")`` objects are different tokens,
    the name is only used for messages.
    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Token({self.name!r})"


@dataclass(frozen=True)
class LazyDependency:
    """Declares that a consumer wants a `Lazy` handle for `token` instead of an instance."""

    token: Any
    cached: bool = True


class MetadataRegistry:
    """Per-component declarations: dependency tokens, provided token and scope.

    Populated once at component-definition time and only read afterwards.
    """

    def __init__(self) -> None:
        self._dependencies: dict[Any, tuple[Any, ...]] = {}
        self._provisions: dict[Any, Any] = {}
        self._scopes: dict[Any, Scope] = {}

    def declare_dependencies(self, component: Any, tokens: Iterable[Any]) -> None:
        if component in self._dependencies:
            msg = f"Dependencies of {describe(component)} are already declared."
            raise ValueError(msg)
        self._dependencies[component] = tuple(tokens)
        logger.debug("Declared dependencies of %s: %s", describe(component), self._dependencies[component])

    def lookup(self, component: Any) -> tuple[Any, ...]:
        try:
            return self._dependencies[component]
        except (KeyError, TypeError):
            raise MissingMetadataError(component) from None

    def is_declared(self, component: Any) -> bool:
        try:
            return component in self._dependencies
        except TypeError:
            return False

    def dependencies_for(self, component: Any) -> tuple[Any, ...]:
        """Declared dependencies, or none for a component callable without arguments."""
        if self.is_declared(component):
            return self._dependencies[component]
        if _callable_without_arguments(component):
            return ()
        raise MissingMetadataError(component)

    def declare_provision(self, component: Any, token: Any) -> None:
        if component in self._provisions:
            msg = f"{describe(component)} already provides {describe(self._provisions[component])}."
            raise ValueError(msg)
        self._provisions[component] = token

    def provided_token(self, component: Any) -> Any | None:
        return self._provisions.get(component)

    def declare_scope(self, component: Any, scope: Scope) -> None:
        self._scopes[component] = scope

    def scope_of(self, component: Any) -> Scope:
        try:
            return self._scopes.get(component, Scope.SINGLETON)
        except TypeError:
            return Scope.SINGLETON


registry = MetadataRegistry()


def declare_dependencies(component: Any, tokens: Iterable[Any]) -> None:
    """Record the ordered dependency tokens of `component` in the default registry."""
    registry.declare_dependencies(component, tokens)


def inject(*tokens: Any) -> Callable[[C], C]:
    """Class/function decorator declaring constructor dependencies, in parameter order.

    Example:
      @inject(Engine, lazy(Radio))
      class Car:
          def __init__(self, engine, radio): ...

    """

    def decorator(component: C) -> C:
        registry.declare_dependencies(component, tokens)
        return component

    return decorator


def provide(token: Any) -> Callable[[C], C]:
    """Mark a class or factory function as a provider for `token` when listed in overrides."""

    def decorator(component: C) -> C:
        registry.declare_provision(component, token)
        return component

    return decorator


def scoped(scope: Scope) -> Callable[[C], C]:
    def decorator(component: C) -> C:
        registry.declare_scope(component, scope)
        return component

    return decorator


transient = scoped(Scope.TRANSIENT)


def lazy(token: Any, *, cached: bool = True) -> LazyDependency:
    return LazyDependency(token, cached=cached)


def _callable_without_arguments(component: Any) -> bool:
    if not callable(component):
        return False
    try:
        sig = inspect.signature(component)
    except (TypeError, ValueError):
        return False

    try:
        sig.bind()
    except TypeError:
        return False
    else:
        return True
