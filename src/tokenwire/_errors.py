from __future__ import annotations

from typing import Any


def describe(token: object) -> str:
    """Readable name for a token in error messages."""
    name = getattr(token, "__name__", None)
    return name if isinstance(name, str) else repr(token)


class ResolutionError(RuntimeError):
    pass


class MissingMetadataError(ResolutionError):
    """A component was used as a class/factory provider without a dependency declaration."""

    def __init__(self, component: Any) -> None:
        self.component = component
        super().__init__(
            f"No dependency declaration recorded for {describe(component)} and it cannot be called without arguments"
        )


class NoProviderError(ResolutionError):
    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(f"No provider for {describe(token)} in this injector or any of its parents")


class CircularDependencyError(ResolutionError):
    def __init__(self, chain: list[Any]) -> None:
        self.chain = list(chain)
        super().__init__("Circular dependency: " + " -> ".join(describe(t) for t in self.chain))


class InstantiationError(ResolutionError):
    def __init__(self, token: Any, cause: BaseException) -> None:
        self.token = token
        self.cause = cause
        super().__init__(f"Error while instantiating {describe(token)}: {type(cause).__name__}: {cause}")
