"""Strict (checked) integer arithmetic mirroring DSS's _add/_sub/_mul.

Unlike cdp_engine.math.display, every function here raises instead of
returning a degraded value:
- Addition leaving the uint256 range raises AdditionOverflow
- Subtraction below zero raises SubtractionUnderflow
- Multiplication leaving the uint256 range raises MultiplicationOverflow
- Division by zero raises DivisionByZero

Use this family wherever a silent wrong answer is worse than a hard failure,
e.g. anything that feeds transaction construction.

Usage:
    from cdp_engine.math.checked import W

    per_second = W(base) + duty         # AdditionOverflow past 2^256 - 1
"""

from __future__ import annotations

from cdp_engine.constants import RAY, UINT256_MAX
from cdp_engine.math.display import div_trunc

__all__ = [
    # Errors
    "CheckedArithmeticError",
    "AdditionOverflow",
    "SubtractionUnderflow",
    "MultiplicationOverflow",
    "DivisionByZero",
    # Functions
    "safe_add",
    "safe_sub",
    "safe_mul",
    "safe_div",
    "safe_rmul",
    # Wrapper
    "Word",
    "W",
]


class CheckedArithmeticError(ArithmeticError):
    """Base class for checked arithmetic errors."""

    pass


class AdditionOverflow(CheckedArithmeticError):
    """Sum does not fit in a uint256."""

    pass


class SubtractionUnderflow(CheckedArithmeticError):
    """Subtraction would produce a negative result."""

    pass


class MultiplicationOverflow(CheckedArithmeticError):
    """Product does not fit in a uint256."""

    pass


class DivisionByZero(CheckedArithmeticError):
    """Division by zero."""

    pass


def safe_add(a: int, b: int) -> int:
    """a + b, raising AdditionOverflow outside the uint256 range.

    The `result < a` test is the contract's own check; with unbounded ints it
    only fires for a negative addend, so the uint256 bound is checked too.
    """
    result = a + b
    if result < a or result > UINT256_MAX:
        raise AdditionOverflow(f"addition overflow: {a} + {b}")
    return result


def safe_sub(a: int, b: int) -> int:
    """a - b, raising SubtractionUnderflow when b > a."""
    if b > a:
        raise SubtractionUnderflow(f"subtraction underflow: {a} - {b}")
    return a - b


def safe_mul(a: int, b: int) -> int:
    """a * b, raising MultiplicationOverflow when |a * b| exceeds 2^256 - 1.

    Signed operands are accepted, as in safe_div; only the magnitude is bound.
    """
    result = a * b
    if abs(result) > UINT256_MAX:
        raise MultiplicationOverflow(f"multiplication overflow: {a} * {b}")
    return result


def safe_div(a: int, b: int) -> int:
    """a / b truncated toward zero, raising DivisionByZero when b == 0."""
    if b == 0:
        raise DivisionByZero(f"division by zero: {a} / 0")
    return div_trunc(a, b)


def safe_rmul(a: int, b: int) -> int:
    """RAY multiplication with an overflow-checked product (DSS _rmul)."""
    return safe_mul(a, b) // RAY


class Word:
    """A uint256 word whose operators go through the checked functions.

    Lets a contract formula be written inline and still revert at the first
    step that leaves the uint256 range:

        debt = Word(art).rmul(rate).value
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | Word) -> None:
        if isinstance(value, Word):
            value = value._value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Word requires an int, got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"Word({self._value})"

    # Arithmetic

    def __add__(self, other: Word | int) -> Word:
        return Word(safe_add(self._value, _raw(other)))

    def __radd__(self, other: int) -> Word:
        return Word(safe_add(other, self._value))

    def __sub__(self, other: Word | int) -> Word:
        return Word(safe_sub(self._value, _raw(other)))

    def __rsub__(self, other: int) -> Word:
        return Word(safe_sub(other, self._value))

    def __mul__(self, other: Word | int) -> Word:
        return Word(safe_mul(self._value, _raw(other)))

    def __rmul__(self, other: int) -> Word:
        return Word(safe_mul(other, self._value))

    def __floordiv__(self, other: Word | int) -> Word:
        return Word(safe_div(self._value, _raw(other)))

    def __rfloordiv__(self, other: int) -> Word:
        return Word(safe_div(other, self._value))

    def __truediv__(self, other: object) -> Word:
        raise TypeError("Word has no true division, use //")

    def rmul(self, other: Word | int) -> Word:
        """DSS _rmul: checked product, then / RAY."""
        return Word(safe_rmul(self._value, _raw(other)))

    # Comparison

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Word, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: Word | int) -> bool:
        return self._value < _raw(other)

    def __le__(self, other: Word | int) -> bool:
        return self._value <= _raw(other)

    def __gt__(self, other: Word | int) -> bool:
        return self._value > _raw(other)

    def __ge__(self, other: Word | int) -> bool:
        return self._value >= _raw(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0


def _raw(x: Word | int) -> int:
    return x._value if isinstance(x, Word) else x


W = Word
