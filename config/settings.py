"""
Global settings for the Eligibility Checker
Defaults live here as constants; environment variables (or a .env file) override them
"""
import os
from dataclasses import dataclass, field
from typing import Final, Optional

from dotenv import load_dotenv

from config.contracts import (
    DEFAULT_CONTRACT_ADDRESS,
    DEFAULT_RPC_ENDPOINTS,
    DEFAULT_TOKEN_SYMBOL,
    ELIGIBILITY_CHECKS,
    EligibilityCheck,
)
from core.encoding import normalize_address, parse_selector
from core.errors import ConfigError

# Load .env file
load_dotenv()

# Delay between two addresses of a batch, in seconds
REQUEST_DELAY_SECONDS: Final[float] = 0.1

# Hard timeout for a single eth_call, in seconds
CALL_TIMEOUT_SECONDS: Final[float] = 15.0

# Logging level
LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class CheckerConfig:
    """Everything the resolver and orchestrator need, built once at startup"""
    rpc_endpoints: list[str] = field(default_factory=lambda: list(DEFAULT_RPC_ENDPOINTS))
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    checks: tuple[EligibilityCheck, ...] = ELIGIBILITY_CHECKS
    request_delay: float = REQUEST_DELAY_SECONDS
    call_timeout: float = CALL_TIMEOUT_SECONDS
    token_symbol: str = DEFAULT_TOKEN_SYMBOL
    # Token bucket instead of the fixed delay when set
    rate_limit_per_second: Optional[float] = None

    def validate(self) -> "CheckerConfig":
        """Raise ConfigError if the configuration cannot work at all"""
        endpoints = [url for url in self.rpc_endpoints if url]
        if not endpoints:
            raise ConfigError("No RPC endpoint configured")
        for url in endpoints:
            if not url.startswith(("http://", "https://")):
                raise ConfigError(f"RPC endpoint must be an http(s) URL: {url}")

        if normalize_address(self.contract_address) is None:
            raise ConfigError(f"Invalid contract address: {self.contract_address}")

        if len(self.checks) != 2:
            raise ConfigError(f"Exactly two eligibility checks expected, got {len(self.checks)}")
        for check in self.checks:
            if len(check.selector) != 4:
                raise ConfigError(f"Selector for {check.name} must be 4 bytes")

        if self.request_delay < 0:
            raise ConfigError("Request delay cannot be negative")
        if self.call_timeout <= 0:
            raise ConfigError("Call timeout must be positive")
        if self.rate_limit_per_second is not None and self.rate_limit_per_second <= 0:
            raise ConfigError("Rate limit must be positive")
        return self


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def load_config(**overrides) -> CheckerConfig:
    """
    Build the checker configuration from defaults and environment variables

    Keyword overrides (e.g. from the command line) win over the environment.
    None values are ignored so callers can pass optional CLI arguments straight through.
    """
    values: dict = {}

    rpc_url = os.getenv("RPC_URL")
    if rpc_url:
        values["rpc_endpoints"] = [u.strip() for u in rpc_url.split(",") if u.strip()]

    contract = os.getenv("CONTRACT_ADDRESS")
    if contract:
        values["contract_address"] = contract.strip()

    selector_1 = os.getenv("ELIGIBILITY_SELECTOR_1")
    selector_2 = os.getenv("ELIGIBILITY_SELECTOR_2")
    if selector_1 or selector_2:
        values["checks"] = (
            EligibilityCheck(
                ELIGIBILITY_CHECKS[0].name,
                parse_selector(selector_1) if selector_1 else ELIGIBILITY_CHECKS[0].selector,
            ),
            EligibilityCheck(
                ELIGIBILITY_CHECKS[1].name,
                parse_selector(selector_2) if selector_2 else ELIGIBILITY_CHECKS[1].selector,
            ),
        )

    values["request_delay"] = _env_float("REQUEST_DELAY_SECONDS", REQUEST_DELAY_SECONDS)
    values["call_timeout"] = _env_float("CALL_TIMEOUT_SECONDS", CALL_TIMEOUT_SECONDS)
    values["rate_limit_per_second"] = _env_float("RATE_LIMIT_PER_SECOND", None)

    symbol = os.getenv("TOKEN_SYMBOL")
    if symbol:
        values["token_symbol"] = symbol.strip()

    values.update({k: v for k, v in overrides.items() if v is not None})
    return CheckerConfig(**values).validate()
