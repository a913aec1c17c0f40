"""Scale-tagged fixed-point values: Wad, Ray and Rad.

The contracts keep every quantity as an untyped uint256 and rely on naming
conventions to track its scale. These wrappers make the scale part of the
type: arithmetic between two values of the same scale works as usual, mixing
scales raises TypeError, and moving between scales requires an explicit
conversion method.

Example:
    debt = Wad(art).ray_scaled(Ray(rate))     # art * rate / RAY, in WAD
    ratio = Ray(mat).to_wad()                 # explicit, truncating
    debt + Ray(mat)                           # TypeError
"""

from __future__ import annotations

from typing import ClassVar, TypeVar

from cdp_engine.constants import (
    RAD,
    RAD_DECIMALS,
    RAY,
    RAY_DECIMALS,
    RAY_RAD_RATIO,
    WAD,
    WAD_DECIMALS,
    WAD_RAD_RATIO,
    WAD_RAY_RATIO,
)
from cdp_engine.math import display
from cdp_engine.math.rpow import rpow

__all__ = ["Wad", "Ray", "Rad"]

T = TypeVar("T", bound="_Scaled")


class _Scaled:
    """Base class for scale-tagged integers.

    Subclasses set ONE and DECIMALS and provide _mul/_div at their scale.
    """

    ONE: ClassVar[int]
    DECIMALS: ClassVar[int]

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int) -> None:
        """Create from a raw, already-scaled integer.

        Raises:
            TypeError: If value is not a plain int (another scale included)
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"{type(self).__name__} requires a raw int, got {type(value).__name__}"
            )
        self._value = value

    @property
    def value(self) -> int:
        """The raw scaled integer."""
        return self._value

    @classmethod
    def from_int(cls: type[T], units: int) -> T:
        """Create from a whole number of units (scaled by ONE)."""
        return cls(units * cls.ONE)

    @classmethod
    def zero(cls: type[T]) -> T:
        return cls(0)

    @classmethod
    def one(cls: type[T]) -> T:
        return cls(cls.ONE)

    def _same(self, other: object) -> int:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with {type(other).__name__}; "
                "convert explicitly first"
            )
        return other._value  # type: ignore[attr-defined]

    # --- Same-scale arithmetic ---

    def __add__(self: T, other: T) -> T:
        return type(self)(self._value + self._same(other))

    def __sub__(self: T, other: T) -> T:
        """Subtract. The result may be negative."""
        return type(self)(self._value - self._same(other))

    def __neg__(self: T) -> T:
        return type(self)(-self._value)

    def mul(self: T, other: T) -> T:
        """Fixed-point multiply at this scale, truncating toward zero."""
        return type(self)(self._mul(self._value, self._same(other)))

    def div(self: T, other: T) -> T:
        """Fixed-point divide at this scale. Division by zero yields zero."""
        return type(self)(self._div(self._value, self._same(other)))

    @staticmethod
    def _mul(a: int, b: int) -> int:
        raise NotImplementedError

    @staticmethod
    def _div(a: int, b: int) -> int:
        raise NotImplementedError

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _Scaled):
            return self._value == self._same(other)
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        return self._value < self._same(other)

    def __le__(self, other: object) -> bool:
        return self._value <= self._same(other)

    def __gt__(self, other: object) -> bool:
        return self._value > self._same(other)

    def __ge__(self, other: object) -> bool:
        return self._value >= self._same(other)

    def __hash__(self) -> int:
        return hash((self.DECIMALS, self._value))

    def __bool__(self) -> bool:
        return self._value != 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"


class Wad(_Scaled):
    """18-decimal fixed-point value (token amounts, prices)."""

    ONE: ClassVar[int] = WAD
    DECIMALS: ClassVar[int] = WAD_DECIMALS
    __slots__ = ()

    _mul = staticmethod(display.wad_mul)
    _div = staticmethod(display.wad_div)

    def to_ray(self) -> Ray:
        return Ray(self._value * WAD_RAY_RATIO)

    def to_rad(self) -> Rad:
        return Rad(self._value * WAD_RAD_RATIO)

    def ray_scaled(self, rate: Ray) -> Wad:
        """WAD * RAY / RAY -> WAD (e.g. normalized debt times rate)."""
        if not isinstance(rate, Ray):
            raise TypeError(f"ray_scaled expects Ray, got {type(rate).__name__}")
        return Wad(display.ray_mul(self._value, rate.value))

    def times_ray(self, rate: Ray) -> Rad:
        """Exact WAD * RAY product, which is a RAD (as the Vat computes art * rate)."""
        if not isinstance(rate, Ray):
            raise TypeError(f"times_ray expects Ray, got {type(rate).__name__}")
        return Rad(self._value * rate.value)


class Ray(_Scaled):
    """27-decimal fixed-point value (rates, ratios, accumulators)."""

    ONE: ClassVar[int] = RAY
    DECIMALS: ClassVar[int] = RAY_DECIMALS
    __slots__ = ()

    _mul = staticmethod(display.ray_mul)
    _div = staticmethod(display.ray_div)

    def to_wad(self) -> Wad:
        """Truncating conversion to WAD."""
        return Wad(display.div_trunc(self._value, WAD_RAY_RATIO))

    def to_rad(self) -> Rad:
        return Rad(self._value * RAY_RAD_RATIO)

    def pow(self, n: int) -> Ray:
        """Compound this per-period rate over n periods with rpow."""
        return Ray(rpow(self._value, n))


class Rad(_Scaled):
    """45-decimal fixed-point value (aggregate debt, ceilings, floors)."""

    ONE: ClassVar[int] = RAD
    DECIMALS: ClassVar[int] = RAD_DECIMALS
    __slots__ = ()

    _mul = staticmethod(display.rad_mul)
    _div = staticmethod(display.rad_div)

    def to_wad(self) -> Wad:
        """Truncating conversion to WAD."""
        return Wad(display.div_trunc(self._value, WAD_RAD_RATIO))

    def to_ray(self) -> Ray:
        """Truncating conversion to RAY."""
        return Ray(display.div_trunc(self._value, RAY_RAD_RATIO))
