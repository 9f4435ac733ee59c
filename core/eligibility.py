"""
Eligibility resolution for a single address
Queries both eligibility views concurrently and reduces them to one amount
"""
import asyncio
from dataclasses import dataclass, field
from typing import Optional

from config.settings import CheckerConfig
from core.decoding import decode_amount
from core.encoding import encode_call, require_address
from core.errors import FailureKind, TransportError, ValidationError
from core.rpc_client import RPCClient
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EligibilityOutcome:
    """Result for one address; error is set when the address could not be resolved"""
    address: str  # 0x-prefixed lowercase on success, the raw input on failure
    is_eligible: bool
    amount: float
    error: Optional[str] = None
    failure: Optional[FailureKind] = None
    check_amounts: tuple[float, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, address: str, kind: FailureKind, message: str) -> "EligibilityOutcome":
        """Terminal outcome for an address that could not be resolved"""
        return cls(
            address=address,
            is_eligible=False,
            amount=0,
            error=message,
            failure=kind,
        )


class EligibilityResolver:
    """
    Resolves the eligible amount of an address
    Never raises for a single address: every failure becomes an outcome with error set
    """
    
    def __init__(self, client: RPCClient, config: CheckerConfig):
        self.client = client
        self.config = config
    
    async def _call_all(self, payloads: list[bytes]) -> list[bytes]:
        """Run all calls at once; if one fails the others are cancelled"""
        tasks = [
            asyncio.create_task(self.client.call(self.config.contract_address, payload))
            for payload in payloads
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # Let cancelled siblings finish before reporting the failure
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
    
    async def resolve(self, address: str) -> EligibilityOutcome:
        """Check one address against both eligibility views"""
        try:
            normalized = require_address(address)
        except ValidationError as e:
            logger.warning(f"[yellow]Skipping {address!r}: {e}[/yellow]")
            return EligibilityOutcome.failed(address, FailureKind.VALIDATION, str(e))
        
        payloads = [encode_call(check.selector, normalized) for check in self.config.checks]
        
        try:
            results = await self._call_all(payloads)
            amounts = tuple(decode_amount(raw) for raw in results)
        except asyncio.CancelledError:
            raise
        except TransportError as e:
            logger.warning(f"[red]RPC failure for 0x{normalized}: {e}[/red]")
            return EligibilityOutcome.failed(address, FailureKind.TRANSPORT, str(e))
        except Exception as e:
            logger.warning(f"[red]Unexpected failure for 0x{normalized}: {e!r}[/red]")
            return EligibilityOutcome.failed(address, FailureKind.UNEXPECTED, str(e) or type(e).__name__)
        
        amount = max(amounts) if amounts else 0
        outcome = EligibilityOutcome(
            address=f"0x{normalized}",
            is_eligible=amount > 0,
            amount=amount,
            check_amounts=amounts,
        )
        logger.debug(f"0x{normalized}: {dict(zip((c.name for c in self.config.checks), amounts))}")
        return outcome
