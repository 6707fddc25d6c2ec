"""Deterministic transcendental functions over `decimal.Decimal`.

Every function runs in a private 28-digit context so results do not depend on
the caller's decimal context or on host floating-point hardware. Series are
evaluated until successive partial sums are equal or `MAX_ITERATIONS` terms
have been added.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from contextlib import AbstractContextManager
from decimal import ROUND_FLOOR, ROUND_HALF_EVEN, Context, Decimal, localcontext
from functools import wraps
from typing import Any, TypeVar

PRECISION = 28
MAX_ITERATIONS = 100

PI = Decimal("3.14159265358979323846264338327950288419716939937510")
E = Decimal("2.7182818284590452353602874713526624977572470936999595749")
EPSILON = Decimal("0.0000000000000000001")

_CONTEXT = Context(prec=PRECISION, rounding=ROUND_HALF_EVEN)
_ZERO = Decimal(0)
_ONE = Decimal(1)
_HALF = Decimal("0.5")
_TWO_PI = Decimal("6.28318530717958647692528676655900576839433879875021")
_HALF_PI = Decimal("1.570796326794896619231321691639751442098584699687552910487")
_QUARTER_PI = Decimal("0.785398163397448309615660845819875721049292349843776455243")
_INV_E = Decimal("0.3678794411714423215955237701614608674458111310317678")
_LOG10_INV = Decimal("0.434294481903251827651128918916605082294397005803666566114")
_DOMAIN_TOLERANCE = Decimal("1e-26")

T = TypeVar("T")


class PrecisionDomainError(ValueError):
    """Raised when an argument lies outside a function's domain."""


def _in_context(func: Callable[..., T]) -> Callable[..., T]:
    """Evaluate `func` inside the module's fixed-precision decimal context."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        with localcontext(_CONTEXT):
            return func(*args, **kwargs)

    return wrapper


def floor(x: Decimal) -> Decimal:
    """Return the largest integral value not greater than `x`."""
    return x.to_integral_value(rounding=ROUND_FLOOR)


def _truncate(x: Decimal) -> Decimal:
    return Decimal(int(x))


def _wrap_two_pi(x: Decimal) -> Decimal:
    """Reduce `x` into [-2π, 2π]."""
    while x >= _TWO_PI:
        x -= abs(int(x / _TWO_PI)) * _TWO_PI
    while x <= -_TWO_PI:
        x += abs(int(x / _TWO_PI)) * _TWO_PI
    return x


def _is_sine_positive(x: Decimal) -> bool:
    x = _wrap_two_pi(x)
    if -_TWO_PI <= x <= -PI:
        return True
    if -PI <= x <= _ZERO:
        return False
    if _ZERO <= x <= PI:
        return True
    if PI <= x <= _TWO_PI:
        return False
    return True


@_in_context
def exp(x: Decimal) -> Decimal:
    """Return e raised to `x`."""
    count = 0
    if x > _ONE:
        count = int(_truncate(x))
        x -= _truncate(x)
    if x < _ZERO:
        count = int(_truncate(x) - 1)
        x = _ONE + (x - _truncate(x))

    result = _ONE
    factorial = _ONE
    for iteration in range(1, MAX_ITERATIONS + 1):
        cached = result
        factorial *= x / iteration
        result += factorial
        if cached == result:
            break

    if count == 0:
        return result
    return result * power_n(E, count)


@_in_context
def power_n(value: Decimal, exponent: int) -> Decimal:
    """Raise `value` to an integer power by repeated squaring."""
    if exponent == 0:
        return _ONE
    if exponent < 0:
        if value == _ZERO:
            raise PrecisionDomainError("zero base and negative power")
        value = _ONE / value
        exponent = -exponent

    product = _ONE
    current = value
    while exponent > 0:
        if exponent % 2 == 1:
            product = current * product
            exponent -= 1
        current *= current
        exponent >>= 1
    return product


def _is_integer(value: Decimal) -> bool:
    return abs(value - _truncate(value)) <= EPSILON


@_in_context
def power(value: Decimal, exponent: Decimal) -> Decimal:
    """Raise `value` to a decimal power."""
    if exponent == _ZERO:
        return _ONE
    if exponent == _ONE:
        return value
    if value == _ONE:
        return _ONE
    if value == _ZERO:
        if exponent > _ZERO:
            return _ZERO
        raise PrecisionDomainError("zero base and negative power")
    if exponent == -_ONE:
        return _ONE / value

    integral = _is_integer(exponent)
    if value < _ZERO and not integral:
        raise PrecisionDomainError("negative base and non-integer power")
    if integral and value > _ZERO:
        return power_n(value, int(exponent))
    if integral:
        magnitude = exp(exponent * log(-value))
        return magnitude if int(exponent) % 2 == 0 else -magnitude
    return exp(exponent * log(value))


@_in_context
def log(x: Decimal) -> Decimal:
    """Return the natural logarithm of `x`."""
    if x <= _ZERO:
        raise PrecisionDomainError("log argument must be greater than zero")

    count = 0
    while x >= _ONE:
        x *= _INV_E
        count += 1
    while x <= _INV_E:
        x *= E
        count -= 1

    x -= _ONE
    if x == _ZERO:
        return Decimal(count)

    result = _ZERO
    y = _ONE
    for iteration in range(1, MAX_ITERATIONS + 1):
        cached = result
        y *= -x
        result += y / iteration
        if cached == result:
            break
    return count - result


@_in_context
def log10(x: Decimal) -> Decimal:
    """Return the base-10 logarithm of `x`."""
    return log(x) * _LOG10_INV


@_in_context
def cos(x: Decimal) -> Decimal:
    """Return the cosine of `x` radians."""
    x = _wrap_two_pi(x)
    if PI <= x <= _TWO_PI:
        return -cos(x - PI)
    if -_TWO_PI <= x <= -PI:
        return -cos(x + PI)

    x *= x
    term = -x * _HALF
    y = _ONE + term
    for i in range(1, MAX_ITERATIONS):
        cached = y
        # term ratio is -x / ((2i + 1)(2i + 2))
        term *= x * (-_HALF / (i * ((i << 1) + 3) + 1))
        y += term
        if cached == y:
            break
    return y


def _sin_from_cos(x: Decimal, cosine: Decimal) -> Decimal:
    magnitude = sqrt(max(_ZERO, _ONE - cosine * cosine))
    return magnitude if _is_sine_positive(x) else -magnitude


@_in_context
def sin(x: Decimal) -> Decimal:
    """Return the sine of `x` radians."""
    return _sin_from_cos(x, cos(x))


@_in_context
def tan(x: Decimal) -> Decimal:
    """Return the tangent of `x` radians."""
    cosine = cos(x)
    if cosine == _ZERO:
        raise PrecisionDomainError("tan is undefined where cos is zero")
    return _sin_from_cos(x, cosine) / cosine


@_in_context
def sqrt(x: Decimal, epsilon: Decimal | None = None) -> Decimal:
    """Return the square root of `x` by Newton-Raphson iteration.

    Iteration stops once successive approximations differ by no more than
    `epsilon`, or by one unit in the last place when `epsilon` is omitted.
    """
    if x < _ZERO:
        raise PrecisionDomainError("cannot take the square root of a negative number")

    current = Decimal(math.sqrt(float(x))) + 0
    for _ in range(MAX_ITERATIONS):
        previous = current
        if previous == _ZERO:
            return _ZERO
        current = (previous + x / previous) * _HALF
        tolerance = epsilon if epsilon is not None else current.next_plus() - current
        if abs(previous - current) <= tolerance:
            break
    return current


def _clamp_unit(x: Decimal) -> Decimal:
    if x > _ONE:
        if x - _ONE > _DOMAIN_TOLERANCE:
            raise PrecisionDomainError(f"argument must be in [-1, 1], got {x}")
        return _ONE
    if x < -_ONE:
        if -_ONE - x > _DOMAIN_TOLERANCE:
            raise PrecisionDomainError(f"argument must be in [-1, 1], got {x}")
        return -_ONE
    return x


@_in_context
def asin(x: Decimal) -> Decimal:
    """Return the arcsine of `x` in radians."""
    x = _clamp_unit(x)
    if x == _ZERO:
        return _ZERO
    if x == _ONE:
        return _HALF_PI
    if x < _ZERO:
        return -asin(-x)

    # asin(x) = (pi/2 - asin(1 - 2x^2)) / 2 moves the argument towards zero
    reduced = _ONE - 2 * x * x
    if abs(x) > abs(reduced):
        return _HALF * (_HALF_PI - asin(reduced))

    y = x
    term = x
    xx = x * x
    for i in range(1, MAX_ITERATIONS + 1):
        cached = y
        term *= xx * (_ONE - _HALF / i)
        y += term / ((i << 1) + 1)
        if cached == y:
            break
    return y


@_in_context
def acos(x: Decimal) -> Decimal:
    """Return the arccosine of `x` in radians."""
    if x == _ZERO:
        return _HALF_PI
    if x == _ONE:
        return _ZERO
    if x < _ZERO:
        return PI - acos(-x)
    return _HALF_PI - asin(x)


@_in_context
def atan(x: Decimal) -> Decimal:
    """Return the arctangent of `x` in radians."""
    if x == _ZERO:
        return _ZERO
    if x == _ONE:
        return _QUARTER_PI
    return asin(x / sqrt(_ONE + x * x))


@_in_context
def atan2(y: Decimal, x: Decimal) -> Decimal:
    """Return the angle of the point `(x, y)` in (-π, π]."""
    if x == _ZERO:
        if y > _ZERO:
            return _HALF_PI
        if y < _ZERO:
            return -_HALF_PI
        raise PrecisionDomainError("atan2 is undefined at the origin")
    if x > _ZERO:
        return atan(y / x)
    if y >= _ZERO:
        return atan(y / x) + PI
    return atan(y / x) - PI


@_in_context
def deg_to_rad(angle_deg: Decimal) -> Decimal:
    """Convert degrees to radians."""
    return PI * angle_deg / 180


@_in_context
def rad_to_deg(angle_rad: Decimal) -> Decimal:
    """Convert radians to degrees."""
    return 180 * angle_rad / PI


def precision_context() -> AbstractContextManager[Context]:
    """Return a context manager switching to the module's decimal context."""
    return localcontext(_CONTEXT)
