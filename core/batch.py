"""
Batch eligibility checks
Addresses are resolved one after another, with a throttle between them
"""
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from core.eligibility import EligibilityOutcome, EligibilityResolver
from utils.rate_limiter import NoThrottle, Throttle
from utils.logger import get_logger

logger = get_logger(__name__)

ResultCallback = Callable[[EligibilityOutcome, int], Any]


@dataclass(frozen=True)
class SummaryReport:
    """Aggregate over a list of outcomes"""
    total: int
    eligible: int
    not_eligible: int
    errors: int
    total_amount: float


def summarize(outcomes: Iterable[EligibilityOutcome]) -> SummaryReport:
    """Partition outcomes into eligible / not eligible / errored and total the eligible amount"""
    outcomes = list(outcomes)
    eligible = [o for o in outcomes if o.is_eligible and o.error is None]
    not_eligible = [o for o in outcomes if not o.is_eligible and o.error is None]
    errors = [o for o in outcomes if o.error is not None]
    
    return SummaryReport(
        total=len(outcomes),
        eligible=len(eligible),
        not_eligible=len(not_eligible),
        errors=len(errors),
        total_amount=sum(o.amount for o in eligible),
    )


class BatchOrchestrator:
    """
    Runs the resolver over an ordered list of addresses
    Exactly one outcome per address, in input order, whatever fails
    """
    
    def __init__(self, resolver: EligibilityResolver, throttle: Optional[Throttle] = None):
        self.resolver = resolver
        self.throttle = throttle or NoThrottle()
    
    async def check(self, address: str) -> EligibilityOutcome:
        """Resolve a single address"""
        return await self.resolver.resolve(address)
    
    async def resolve_all(
        self,
        addresses: Iterable[str],
        on_result: Optional[ResultCallback] = None
    ) -> list[EligibilityOutcome]:
        """
        Resolve every address sequentially
        
        Args:
            addresses: Addresses in the order results should come back
            on_result: Called with (outcome, 1-based index) as soon as each outcome is known
        """
        addresses = list(addresses)
        outcomes: list[EligibilityOutcome] = []
        logger.info(f"Checking {len(addresses)} addresses...")
        
        for i, address in enumerate(addresses):
            if i > 0:
                await self.throttle.acquire()
            
            outcome = await self.resolver.resolve(address)
            outcomes.append(outcome)
            
            if on_result is not None:
                ret = on_result(outcome, i + 1)
                if inspect.isawaitable(ret):
                    await ret
        
        return outcomes
    
    def summarize(self, outcomes: Iterable[EligibilityOutcome]) -> SummaryReport:
        return summarize(outcomes)
