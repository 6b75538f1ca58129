"""EAN-13 barcode generation for products registered without one."""

import random

EAN13_BASE_LENGTH = 12


def ean13_check_digit(base: str) -> int:
    """Check digit for a 12-digit EAN-13 base (weights 1, 3 alternating)."""
    total = sum(int(digit) * (1 if index % 2 == 0 else 3) for index, digit in enumerate(base))
    return (10 - total % 10) % 10


def to_ean13(base_number: str) -> str:
    """Pad or truncate to 12 digits and append the check digit."""
    base = base_number.zfill(EAN13_BASE_LENGTH)[:EAN13_BASE_LENGTH]
    return f"{base}{ean13_check_digit(base)}"


def random_ean13(rng: random.Random | None = None) -> str:
    rng = rng or random.SystemRandom()
    return to_ean13(str(rng.randint(10**11, 10**12 - 1)))


def is_valid_ean13(code: str) -> bool:
    if len(code) != 13 or not code.isdigit():
        return False
    return ean13_check_digit(code[:12]) == int(code[12])
