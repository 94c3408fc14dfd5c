"""A boolean-like setting that also knows the "not asked" state."""

from __future__ import annotations

__all__ = ["Ternary"]


class Ternary(str):
    """A string value that is ALLOW, DISALLOW or NOT_ASKED, compared without case."""

    __slots__ = ()

    ALLOW: "Ternary"
    DISALLOW: "Ternary"
    UNKNOWN: "Ternary"

    def validate(self) -> None:
        """Raise ValueError unless the value is one of the known states."""
        known = (Ternary.ALLOW, Ternary.DISALLOW, Ternary.UNKNOWN)
        if any(self.casefold() == value.casefold() for value in known):
            return
        choices = " ".join(str(value) for value in known)
        raise ValueError(
            f'"{str(self)}" is not a valid value; Please use one of: {{{choices}}}'
        )

    def as_bool(self) -> bool:
        """True only when the value is ALLOW."""
        return self.casefold() == Ternary.ALLOW.casefold()

    def __str__(self) -> str:
        return str.__str__(self)

    def __repr__(self) -> str:
        return f"Ternary({str.__repr__(self)})"


Ternary.ALLOW = Ternary("ALLOW")
Ternary.DISALLOW = Ternary("DISALLOW")
Ternary.UNKNOWN = Ternary("NOT_ASKED")