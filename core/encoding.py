"""
Call data encoding for single-address view methods
"""
import re

from eth_abi import encode

from core.errors import ConfigError, ValidationError

ADDRESS_HEX_RE = re.compile(r"[0-9a-f]{40}")
SELECTOR_HEX_RE = re.compile(r"[0-9a-f]{8}")

INVALID_ADDRESS_MESSAGE = "Invalid address format"


def normalize_address(address: str) -> str | None:
    """
    Canonical form of an address: 40 lowercase hex characters, no prefix

    Returns None if the input does not normalize to exactly 40 hex characters.
    """
    if not isinstance(address, str):
        return None
    normalized = address.lower()
    if normalized.startswith("0x"):
        normalized = normalized[2:]
    if not ADDRESS_HEX_RE.fullmatch(normalized):
        return None
    return normalized


def require_address(address: str) -> str:
    """Normalized address, or ValidationError if the format is wrong"""
    normalized = normalize_address(address)
    if normalized is None:
        raise ValidationError(INVALID_ADDRESS_MESSAGE)
    return normalized


def parse_selector(value: str | bytes) -> bytes:
    """Parse a 4-byte method selector given as hex text or raw bytes"""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 4:
            raise ConfigError(f"Method selector must be 4 bytes, got {len(value)}")
        return bytes(value)

    text = value.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not SELECTOR_HEX_RE.fullmatch(text):
        raise ConfigError(f"Invalid method selector: {value!r}")
    return bytes.fromhex(text)


def encode_call(selector: bytes, address: str) -> bytes:
    """
    Build call data: selector followed by the address in a 32-byte ABI slot

    The address must already be normalized (see normalize_address).
    """
    return selector + encode(["address"], ["0x" + address])
