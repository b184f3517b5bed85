# utils/validators.py
from ..errors import ValidationError


def min_length(text: str | None, n: int) -> bool:
    return bool(text is not None and len(str(text).strip()) >= n)


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)
    """
    try:
        return True, float(x)
    except (TypeError, ValueError):
        return False, None


def is_non_negative_number(x) -> bool:
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val >= 0)


def is_strictly_positive_number(x) -> bool:
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val > 0)


def is_non_negative_int(x) -> bool:
    if isinstance(x, bool):
        return False
    if isinstance(x, int):
        return x >= 0
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val >= 0 and float(val).is_integer())


# ---- Raising variants used by repositories/services ----

def require_text(value: str | None, field: str, label: str, min_len: int = 1) -> str:
    if not min_length(value, min_len):
        if min_len <= 1:
            raise ValidationError(field, f"{label} cannot be empty.")
        raise ValidationError(field, f"{label} must have at least {min_len} characters.")
    return str(value).strip()


def require_positive(value, field: str, label: str) -> float:
    if not is_strictly_positive_number(value):
        raise ValidationError(field, f"{label} must be a positive number.")
    return float(value)


def require_non_negative(value, field: str, label: str) -> float:
    if not is_non_negative_number(value):
        raise ValidationError(field, f"{label} cannot be negative.")
    return float(value)


def require_quantity(value, field: str = "quantity", *, allow_zero: bool = False) -> int:
    if not is_non_negative_int(value) or (not allow_zero and int(float(value)) == 0):
        bound = "zero or more" if allow_zero else "greater than zero"
        raise ValidationError(field, f"Quantity must be a whole number {bound}.")
    return int(float(value))
