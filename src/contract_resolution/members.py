"""Member descriptors and the member search policy."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Flag, StrEnum, auto

from contract_resolution.errors import ResolverSettingsError
from contract_resolution.serde import StructBaseStrict


class MemberSearch(Flag):
    """Selection over {instance, static} x {public, non-public}.

    A member is discovered only when both its staticness and its
    accessibility are selected.
    """

    INSTANCE = auto()
    STATIC = auto()
    PUBLIC = auto()
    NON_PUBLIC = auto()

    DEFAULT = INSTANCE | PUBLIC
    ALL = INSTANCE | STATIC | PUBLIC | NON_PUBLIC

    @classmethod
    def parse(cls, value: str | Iterable[str]) -> MemberSearch:
        """Parse flag names such as ``"instance,non_public"``.

        Returns:
        -------
        MemberSearch
            Combined search flags.

        Raises:
        ------
        ResolverSettingsError
            When a name is not a known flag or no flag is given.
        """
        names = value.split(",") if isinstance(value, str) else list(value)
        result = cls(0)
        for raw in names:
            name = raw.strip().upper().replace("-", "_")
            if not name:
                continue
            member = cls.__members__.get(name)
            if member is None:
                msg = f"Unknown member search flag {raw!r}."
                raise ResolverSettingsError(msg)
            result |= member
        if not result:
            msg = "Member search policy selects no members."
            raise ResolverSettingsError(msg)
        return result

    def flag_names(self) -> tuple[str, ...]:
        """Return the lower-case names of the primitive flags that are set.

        Returns:
        -------
        tuple[str, ...]
            Flag names in declaration order.
        """
        return tuple(
            flag.name.lower()
            for flag in (
                MemberSearch.INSTANCE,
                MemberSearch.STATIC,
                MemberSearch.PUBLIC,
                MemberSearch.NON_PUBLIC,
            )
            if flag in self and flag.name is not None
        )

    def selects(self, *, is_static: bool, is_public: bool) -> bool:
        """Return whether a member with the given traits is in scope.

        Returns:
        -------
        bool
            ``True`` when both staticness and accessibility are selected.
        """
        scope = MemberSearch.STATIC if is_static else MemberSearch.INSTANCE
        access = MemberSearch.PUBLIC if is_public else MemberSearch.NON_PUBLIC
        return scope in self and access in self


class MemberKind(StrEnum):
    """How a member stores its value."""

    FIELD = "field"
    PROPERTY = "property"


class MemberDescriptor(StructBaseStrict, frozen=True):
    """One candidate member discovered on a class."""

    name: str
    kind: MemberKind
    declaring_type: type
    value_type: object = None
    logical_name: str | None = None
    is_public: bool = True
    is_static: bool = False
    is_synthesized: bool = False
    override_name: str | None = None
    required: bool | None = None


__all__ = ["MemberDescriptor", "MemberKind", "MemberSearch"]
