import dataclasses
import enum
import json
import math
from typing import Any, Dict, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class Span:
    """Byte offsets ``[start, end)`` into the UTF-8 encoding of the source line."""

    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start <= self.end:
            raise ValueError(f"Invalid span: {self.start}..{self.end}")

    def slice(self, text: str) -> str:
        """Return the part of ``text`` this span covers."""
        return text.encode("utf-8")[self.start : self.end].decode("utf-8")

    def to_dict(self) -> Dict[str, int]:
        return {"from": self.start, "to": self.end}


@dataclasses.dataclass(frozen=True)
class Fraction:
    """An exact quantity. Never reduced: 1 2/4 stays 6/4."""

    numerator: int
    denominator: int

    def __post_init__(self):
        if self.denominator <= 0:
            raise ValueError(f"Denominator must be positive, got {self.denominator}")
        if self.numerator < 0:
            raise ValueError(f"Numerator must not be negative, got {self.numerator}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "fraction",
            "numerator": self.numerator,
            "denominator": self.denominator,
        }


@dataclasses.dataclass(frozen=True)
class Float:
    value: float

    def __post_init__(self):
        if not math.isfinite(self.value):
            raise ValueError(f"Float amount must be finite, got {self.value}")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "float", "value": self.value}


Constant = Union[Fraction, Float]


@dataclasses.dataclass(frozen=True)
class ConstantAmount:
    value: Constant

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "constant", "value": self.value.to_dict()}


@dataclasses.dataclass(frozen=True)
class RangeAmount:
    """A quantity range such as ``2-3``. The bounds are kept as written."""

    value_from: Constant
    value_to: Constant

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "range",
            "from": self.value_from.to_dict(),
            "to": self.value_to.to_dict(),
        }


Amount = Union[ConstantAmount, RangeAmount]


@dataclasses.dataclass(frozen=True)
class ValueWithSpan(Generic[T]):
    value: T
    span: Span

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.value, enum.Enum):
            value = self.value.name
        elif hasattr(self.value, "to_dict"):
            value = self.value.to_dict()
        else:
            value = self.value
        return {"value": value, "span": self.span.to_dict()}


@dataclasses.dataclass(frozen=True)
class IngredientInfo:
    """Structured data extracted from one ingredient line.

    Every field is optional and independent of the others. The container
    fields hold a package size written in parentheses after the amount,
    as in ``1 (400 g) can tomatoes``.
    """

    amount: Optional[ValueWithSpan[Amount]] = None
    unit: Optional[ValueWithSpan[enum.Enum]] = None
    container_amount: Optional[ValueWithSpan[Amount]] = None
    container_unit: Optional[ValueWithSpan[enum.Enum]] = None
    ingredient: Optional[ValueWithSpan[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain data, leaving out absent fields."""
        return {
            field.name: getattr(self, field.name).to_dict()
            for field in dataclasses.fields(self)
            if getattr(self, field.name) is not None
        }

    def to_json(self, **kwargs) -> str:
        return json.dumps(
            self.to_dict(), ensure_ascii=False, allow_nan=False, **kwargs
        )
