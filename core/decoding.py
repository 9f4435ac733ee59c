"""
Decoding of uint256 amounts returned by eligibility views
"""
from typing import Any

from hexbytes import HexBytes
from web3 import Web3

from utils.logger import get_logger

logger = get_logger(__name__)

# Token amounts use 18 fractional digits (wei -> ether)
AMOUNT_DECIMALS = 18

MAX_UINT256 = 2**256 - 1


def _to_bytes(raw: Any) -> bytes:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text.startswith(("0x", "0X")):
            text = "0x" + text
        return bytes(HexBytes(text))
    raise TypeError(f"Unsupported result type: {type(raw).__name__}")


def decode_amount(raw: Any) -> float:
    """
    Convert a raw call result into a token amount

    All-zero results are exactly 0. Anything that cannot be decoded is also
    reported as 0 instead of raising, so one bad return value never fails an
    address; those cases are logged as warnings.
    """
    try:
        data = _to_bytes(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"[yellow]Undecodable call result {raw!r}: {e}[/yellow]")
        return 0

    if not data:
        logger.warning("[yellow]Empty call result, treating amount as 0[/yellow]")
        return 0

    value = int.from_bytes(data, "big")
    if value == 0:
        return 0
    if value > MAX_UINT256:
        logger.warning(f"[yellow]Call result wider than uint256 ({len(data)} bytes), treating amount as 0[/yellow]")
        return 0

    # Decimal arithmetic until the very end; uint256 does not fit a float exactly
    return float(Web3.from_wei(value, "ether"))
