"""
Fixed-point and hex helpers shared by the strategies.
"""
from decimal import Decimal, InvalidOperation

WORD_SIZE = 32


def parse_units(value: str, decimals: int = 18) -> int:
    """
    Convert a decimal string into an integer with `decimals` fractional digits.

    Raises:
        ValueError: If the value is not a decimal number or has more
            fractional digits than `decimals`.
    """
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal amount {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid decimal amount {value!r}")

    scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(
            f"Amount {value!r} has more than {decimals} decimal places"
        )
    return int(scaled)


def pad_byte(value: int, size: int = WORD_SIZE, side: str = "left") -> str:
    """
    Render a single byte as a `size`-byte hex string.

    With side="left" the byte is the least significant one (0x00..00ff);
    with side="right" it is the leading byte (0xff00..00).
    """
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Byte value out of range: {value}")
    byte = f"{value:02x}"
    filler = "00" * (size - 1)
    if side == "left":
        return "0x" + filler + byte
    if side == "right":
        return "0x" + byte + filler
    raise ValueError(f"Invalid padding side {side!r}")
