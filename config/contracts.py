"""
Eligibility contract configuration
Target contract, its two view methods and the default address list
"""
from dataclasses import dataclass
from typing import Final

from core.encoding import parse_selector


@dataclass(frozen=True)
class EligibilityCheck:
    """One read-only eligibility view taking a single address argument"""
    name: str
    selector: bytes  # 4-byte method id

    @property
    def selector_hex(self) -> str:
        return "0x" + self.selector.hex()


DEFAULT_RPC_ENDPOINTS: Final[list[str]] = [
    "https://rpc.gpu.net/",
]

DEFAULT_CONTRACT_ADDRESS: Final[str] = "0x44dfda6f10ad5636f584a3d44280895b55299964"

DEFAULT_TOKEN_SYMBOL: Final[str] = "GPU"

# Both views return a uint256 amount (18 decimals), zero when not eligible
ELIGIBILITY_CHECKS: Final[tuple[EligibilityCheck, ...]] = (
    EligibilityCheck(name="eligibilityCheck1", selector=parse_selector("0x6e21fc87")),
    EligibilityCheck(name="eligibilityCheck2", selector=parse_selector("0xcc29c923")),
)

# Checked when no address is given on the command line
ADDRESSES_TO_CHECK: Final[list[str]] = [
    "0x4325d09777f68f78c5712cdccc953f739b956090",
    "0x84B1aB3D06Bb065074b577ecE55De1b2cbd9311b",
    "0xafa464E614437C87cD1dBC16699b3C8bF9FA63eE",
    "0x87fc424c186f5EE2cc7ad073c8354C59110a3DDc",
]
