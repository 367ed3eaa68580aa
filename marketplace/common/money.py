from dataclasses import dataclass
from typing import Iterable, Union


def _require_cents(value) -> int:
    # bool is an int subclass ,and floats are never accepted for money
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"money amounts are integer cents, got {type(value).__name__}")
    return value


def format_cents(cents: int, symbol: str = "$") -> str:
    """Render integer cents as a currency string, e.g. 14250 -> "$142.50"."""
    cents = _require_cents(cents)
    sign = "-" if cents < 0 else ""
    units, rem = divmod(abs(cents), 100)
    return f"{sign}{symbol}{units}.{rem:02d}"


@dataclass(frozen=True, order=True)
class Money:
    """Exact amount in minor units (cents)."""

    cents: int = 0

    def __post_init__(self):
        _require_cents(self.cents)

    @classmethod
    def zero(cls) -> "Money":
        return cls(0)

    @classmethod
    def total(cls, amounts: Iterable[Union["Money", int]]) -> "Money":
        acc = cls.zero()
        for amount in amounts:
            acc = acc + amount
        return acc

    def _coerce(self, other) -> int:
        if isinstance(other, Money):
            return other.cents
        return _require_cents(other)

    def __add__(self, other) -> "Money":
        return Money(self.cents + self._coerce(other))

    def __radd__(self, other) -> "Money":
        # lets sum() start from the int 0
        return Money(self._coerce(other) + self.cents)

    def __sub__(self, other) -> "Money":
        return Money(self.cents - self._coerce(other))

    def __bool__(self) -> bool:
        return self.cents != 0

    def display(self) -> str:
        return format_cents(self.cents)

    def __str__(self) -> str:
        return self.display()
