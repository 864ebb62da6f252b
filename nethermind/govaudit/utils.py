from decimal import Decimal

from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

NATIVE_DECIMALS = 18


def canonical_address(address: str) -> str:
    """
    Returns the canonical form of an address used for comparisons & dictionary keys.  Canonical addresses are
    lower-case hex strings with a 0x prefix.

    >>> canonical_address("0xAb5801a7D398351b8bE11C439e05C5B3259aeC9B")
    '0xab5801a7d398351b8be11c439e05c5b3259aec9b'
    """
    address = address.strip()
    if not address.startswith(("0x", "0X")):
        address = "0x" + address
    return "0x" + address[2:].lower()


def checksum(address: str) -> ChecksumAddress | str:
    """Checksums an address for display.  Invalid addresses are returned unchanged"""
    if is_address(address):
        return to_checksum_address(address)
    return address


def addresses_match(address_a: str | None, address_b: str | None) -> bool:
    """
    Canonicalizes two addresses and compares them.  Missing addresses never match.

    >>> addresses_match("0xAb5801a7D398351b8bE11C439e05C5B3259aeC9B", "0xab5801a7d398351b8be11c439e05c5b3259aec9b")
    True
    """
    if not address_a or not address_b:
        return False
    return canonical_address(address_a) == canonical_address(address_b)


def normalize_hex(data: str | bytes) -> str:
    """
    Returns lower-case 0x prefixed hex for calldata.  Two calldata strings are byte-identical iff their
    normalized forms are equal.
    """
    if isinstance(data, (bytes, bytearray)):
        return "0x" + data.hex()
    data = data.strip()
    if data.startswith(("0x", "0X")):
        data = data[2:]
    return "0x" + data.lower()


def hex_to_bytes(data: str) -> bytes:
    """Converts a hex string with or without the 0x prefix to bytes"""
    return bytes.fromhex(normalize_hex(data)[2:])


def selector_of(calldata: str) -> str:
    """Returns the 0x prefixed 4 byte function selector of calldata"""
    return normalize_hex(calldata)[:10]


def parse_int(value: str | int | None) -> int:
    """Parses decimal or 0x prefixed hex integers returned by simulation providers.  None is parsed as zero"""
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    value = value.strip()
    if value in ("", "0x"):
        return 0
    if value.startswith(("0x", "0X")):
        return int(value, 16)
    return int(value)


def format_units(raw_amount: int, decimals: int) -> str:
    """
    Converts a raw integer amount into a decimal string without precision loss.  Trailing zeros are stripped,
    but at least one fractional digit is kept.

    >>> format_units(1_000_000_000_000_000_000, 18)
    '1.0'
    >>> format_units(100_000_000_000_000_000, 18)
    '0.1'
    >>> format_units(-123456, 3)
    '-123.456'
    """
    sign = "-" if raw_amount < 0 else ""
    raw_amount = abs(raw_amount)

    if decimals <= 0:
        return f"{sign}{raw_amount}.0"

    whole, fraction = divmod(raw_amount, 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def native_to_wei(amount: Decimal | str | int) -> int:
    """
    Converts an amount of the native asset into wei.  Fractions of a wei are truncated

    >>> native_to_wei(Decimal("0.0001"))
    100000000000000
    """
    return int(Decimal(amount).scaleb(NATIVE_DECIMALS))

