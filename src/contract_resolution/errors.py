"""Exception hierarchy for contract resolution.

Every error raised by the engine itself derives from
:class:`ContractResolutionError`. Exceptions raised by user supplied hooks are
not wrapped; they reach the caller of ``ContractResolver.resolve`` unchanged.
"""

from __future__ import annotations


class ContractResolutionError(RuntimeError):
    """Base error for contract resolution failures."""


class UnsupportedTypeError(ContractResolutionError, TypeError):
    """Raised when a value that is not a class is used as a contract target."""

    def __init__(self, value: object, *, context: str = "resolve") -> None:
        self.value = value
        self.context = context
        msg = f"{context}: expected a class, received {value!r} ({type(value).__name__})."
        super().__init__(msg)


class ContractBuildError(ContractResolutionError):
    """Raised when a contract cannot be assembled from the resolved members."""


class MemberNameCollisionError(ContractBuildError):
    """Raised when two members of one contract share a public name."""

    def __init__(self, type_: type, name: str) -> None:
        self.type = type_
        self.name = name
        msg = (
            f"Contract for {type_.__module__}.{type_.__qualname__} has more than one "
            f"member named {name!r}."
        )
        super().__init__(msg)


class ResolverSettingsError(ContractResolutionError, ValueError):
    """Raised when resolver settings fail validation."""

    def __init__(self, message: str, *, location: str | None = None) -> None:
        self.location = location
        msg = message if location is None else f"{location}: {message}"
        super().__init__(msg)


__all__ = [
    "ContractBuildError",
    "ContractResolutionError",
    "MemberNameCollisionError",
    "ResolverSettingsError",
    "UnsupportedTypeError",
]
