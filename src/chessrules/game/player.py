"""Player record used for move attribution and display."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import Color


@dataclass(frozen=True, slots=True)
class Player:
    """A game participant.

    Args:
        identifier: Stable id of the player (account name, seat id, ...).
        color: Side the player controls.
        name: Optional display name.
        rating: Optional Elo or national rating.
        age: Optional age, shown between name and rating.
    """

    identifier: str
    color: Color
    name: str | None = None
    rating: int | None = None
    age: int | None = None

    def __post_init__(self) -> None:
        if self.name is not None:
            if not self.identifier.strip():
                raise ValueError("A named player needs a non-empty identifier")
            if not self.name.strip():
                raise ValueError("Player name must not be blank")
        if self.age is not None and self.age < 0:
            raise ValueError("Player age must not be negative")

    @property
    def label(self) -> str:
        """Display name, falling back to the identifier."""
        return self.name or self.identifier

    def display(self) -> str:
        """E.g. ``"White: Alice (Age 47) (1850)"``; missing parts are left out."""
        text = f"{str(self.color).capitalize()}: {self.label}"
        if self.age is not None:
            text += f" (Age {self.age})"
        if self.rating is not None:
            text += f" ({self.rating})"
        return text

    def __str__(self) -> str:
        return self.display()
