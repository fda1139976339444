"""Human-readable number formatting for display payloads."""
from cosmic_paperclip.numbers import BigNum

SUFFIXES = (
    (BigNum('1e12'), 'T'),
    (BigNum('1e9'), 'B'),
    (BigNum('1e6'), 'M'),
    (BigNum('1e3'), 'K'),
)

# Beyond this, suffixes stop being readable and we switch to exponent form
EXPONENT_CUTOFF = BigNum('1e15')


def _trim_zeros(text):
    if '.' not in text:
        return text
    return text.rstrip('0').rstrip('.')


def format_number(value, digits=2):
    """Format like 12,345 / 1.5 M / 3.02 T / 5.97e+27; non-finite is '∞'."""
    value = BigNum.coerce(value)
    if not value.is_finite():
        return '∞'

    magnitude = abs(value)
    if magnitude.lt(1_000_000):
        return f"{int(value.round().decimal):,}"

    if magnitude.gte(EXPONENT_CUTOFF):
        return f"{value.decimal:.2e}"

    for cutoff, suffix in SUFFIXES:
        if magnitude.gte(cutoff):
            scaled = value.div(cutoff)
            precision = 2 if magnitude.gte(SUFFIXES[0][0]) else digits
            return f"{_trim_zeros(format(scaled.decimal, f'.{precision}f'))} {suffix}"

    return f"{value.decimal:.2e}"


def format_rate(per_second):
    return f"{format_number(per_second, digits=2)}/s"
