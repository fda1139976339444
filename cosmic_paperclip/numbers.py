"""Extended-precision numbers for resource quantities.

Matter, wire, clips and probes outgrow native floats long before the late
stages (the universal stage alone holds 1e53 grams, and probe counts keep
compounding past that). ``BigNum`` wraps ``decimal.Decimal`` with a dedicated
context so every operation is performed at the same precision regardless of
the caller's thread-local decimal context.

Overflow and division by zero degrade to signed infinity instead of raising.
"""
import math
from decimal import Context, Decimal, MAX_EMAX, MIN_EMIN, ROUND_HALF_EVEN, ROUND_HALF_UP
from functools import total_ordering

PRECISION = 40

# No traps: overflow -> Infinity, x/0 -> +/-Infinity, invalid -> NaN (checked below)
CONTEXT = Context(
    prec=PRECISION,
    rounding=ROUND_HALF_EVEN,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[],
)

_DECIMAL_ONE = Decimal(1)


def _to_decimal(value):
    """Coerce a supported value into a Decimal rounded to CONTEXT."""
    if isinstance(value, BigNum):
        return value._value
    if isinstance(value, bool):
        raise TypeError("BigNum does not accept booleans")
    if isinstance(value, Decimal):
        result = CONTEXT.plus(value)
    elif isinstance(value, int):
        result = CONTEXT.create_decimal(value)
    elif isinstance(value, float):
        if math.isnan(value):
            raise ValueError("BigNum cannot represent NaN")
        if math.isinf(value):
            return Decimal('Infinity') if value > 0 else Decimal('-Infinity')
        # Shortest repr keeps 0.15 as 0.15 rather than its binary expansion
        result = CONTEXT.create_decimal(repr(value))
    elif isinstance(value, str):
        result = CONTEXT.create_decimal(value.strip())
    else:
        raise TypeError(f"Unsupported numeric type: {type(value).__name__}")

    if result.is_nan():
        raise ValueError(f"Not a number: {value!r}")
    return result


@total_ordering
class BigNum:
    """Immutable arbitrary-magnitude real number."""

    __slots__ = ('_value',)

    def __init__(self, value=0):
        self._value = _to_decimal(value)

    @classmethod
    def coerce(cls, value):
        """Return value as a BigNum, reusing it when it already is one."""
        if isinstance(value, cls):
            return value
        return cls(value)

    @classmethod
    def from_string(cls, text):
        """Parse a decimal string such as ``"12345"`` or ``"1E+40"``."""
        if not isinstance(text, str):
            raise TypeError("from_string expects a str")
        return cls(text)

    @property
    def decimal(self):
        return self._value

    # Arithmetic

    def plus(self, other):
        return _wrap(CONTEXT.add(self._value, _to_decimal(other)))

    def minus(self, other):
        return _wrap(CONTEXT.subtract(self._value, _to_decimal(other)))

    def times(self, other):
        return _wrap(CONTEXT.multiply(self._value, _to_decimal(other)))

    def div(self, other):
        divisor = _to_decimal(other)
        if divisor.is_zero():
            return INFINITY if self._value >= 0 else NEG_INFINITY
        return _wrap(CONTEXT.divide(self._value, divisor))

    def pow(self, exponent):
        result = CONTEXT.power(self._value, _to_decimal(exponent))
        if result.is_nan():
            raise ValueError(f"Undefined power: {self} ** {exponent}")
        return _wrap(result)

    def min(self, other):
        other = BigNum.coerce(other)
        return other if other._value < self._value else self

    def max(self, other):
        other = BigNum.coerce(other)
        return other if other._value > self._value else self

    def round(self):
        """Round to the nearest integer, halves away from zero."""
        if not self.is_finite() or self._value.adjusted() >= PRECISION:
            return self
        return _wrap(self._value.quantize(_DECIMAL_ONE, rounding=ROUND_HALF_UP, context=CONTEXT))

    # Comparisons

    def lt(self, other):
        return self._value < _to_decimal(other)

    def lte(self, other):
        return self._value <= _to_decimal(other)

    def gt(self, other):
        return self._value > _to_decimal(other)

    def gte(self, other):
        return self._value >= _to_decimal(other)

    def eq(self, other):
        return self._value == _to_decimal(other)

    def is_finite(self):
        return self._value.is_finite()

    def is_zero(self):
        return self._value.is_zero()

    def is_negative(self):
        return self._value < 0

    # Conversions

    def to_string(self):
        """Canonical exact decimal text; ``BigNum.from_string`` reverses it."""
        value = self._value
        if value.is_infinite():
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_zero():
            return '0'
        integral = value.to_integral_value()
        if value == integral and value.adjusted() < PRECISION:
            return format(integral, 'f')
        return str(value.normalize(CONTEXT))

    def to_float(self):
        """Best-effort float for display; huge values become inf."""
        return float(self._value)

    # Operator protocol

    def __add__(self, other):
        try:
            return self.plus(other)
        except TypeError:
            return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        try:
            return self.minus(other)
        except TypeError:
            return NotImplemented

    def __rsub__(self, other):
        try:
            return BigNum(other).minus(self)
        except TypeError:
            return NotImplemented

    def __mul__(self, other):
        try:
            return self.times(other)
        except TypeError:
            return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        try:
            return self.div(other)
        except TypeError:
            return NotImplemented

    def __rtruediv__(self, other):
        try:
            return BigNum(other).div(self)
        except TypeError:
            return NotImplemented

    def __pow__(self, exponent):
        return self.pow(exponent)

    def __neg__(self):
        return _wrap(CONTEXT.minus(self._value))

    def __abs__(self):
        return _wrap(CONTEXT.abs(self._value))

    def __eq__(self, other):
        try:
            return self.eq(other)
        except (TypeError, ValueError):
            return NotImplemented

    def __lt__(self, other):
        try:
            return self.lt(other)
        except (TypeError, ValueError):
            return NotImplemented

    def __hash__(self):
        return hash(self._value)

    def __bool__(self):
        return not self._value.is_zero()

    def __float__(self):
        return self.to_float()

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"BigNum('{self.to_string()}')"


def _wrap(value):
    num = BigNum.__new__(BigNum)
    num._value = value
    return num


def D(value):
    """Convenience constructor: D(123), D("1e42"), D(existing)."""
    return BigNum.coerce(value)


def big_min(*values):
    result = BigNum.coerce(values[0])
    for value in values[1:]:
        result = result.min(value)
    return result


def big_max(*values):
    result = BigNum.coerce(values[0])
    for value in values[1:]:
        result = result.max(value)
    return result


ZERO = BigNum(0)
ONE = BigNum(1)
INFINITY = _wrap(Decimal('Infinity'))
NEG_INFINITY = _wrap(Decimal('-Infinity'))
