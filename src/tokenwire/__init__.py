"""Token-based dependency injection.

Components declare the tokens they need; an `Injector` builds the object graph
on demand, with singleton, transient and lazy scopes, hierarchical child
injectors and cycle detection.

Exports:
- `Injector`: resolves tokens, owns the instance cache, creates child injectors.
- `Lazy`: handle returned for lazy-scoped bindings and `lazy(...)` dependencies.
- `Token`: explicit token compared by identity.
- `inject`, `provide`, `scoped`, `transient`, `lazy`, `declare_dependencies`:
  declaration helpers recording metadata in the default `registry`.
- `bind_class`, `bind_factory`, `bind_value`, `Binding`: explicit override entries.
- `Scope`, `ProviderKind`: binding policies.
- `ResolutionError` and its subclasses.

Example:
  @inject(Engine)
  class Car:
      def __init__(self, engine): ...

  car = Injector().get(Car)

"""

from ._bindings import Binding, BindingTable, ProviderKind, bind_class, bind_factory, bind_value
from ._errors import (
    CircularDependencyError,
    InstantiationError,
    MissingMetadataError,
    NoProviderError,
    ResolutionError,
)
from ._injector import Injector, Lazy
from ._metadata import (
    LazyDependency,
    MetadataRegistry,
    Scope,
    Token,
    declare_dependencies,
    inject,
    lazy,
    provide,
    registry,
    scoped,
    transient,
)


__all__ = [
    "Binding",
    "BindingTable",
    "CircularDependencyError",
    "Injector",
    "InstantiationError",
    "Lazy",
    "LazyDependency",
    "MetadataRegistry",
    "MissingMetadataError",
    "NoProviderError",
    "ProviderKind",
    "ResolutionError",
    "Scope",
    "Token",
    "bind_class",
    "bind_factory",
    "bind_value",
    "declare_dependencies",
    "inject",
    "lazy",
    "provide",
    "registry",
    "scoped",
    "transient",
]
