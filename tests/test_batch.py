import asyncio

from conftest import CHECK_1, CHECK_2, FakeRPCClient, tokens
from core.batch import BatchOrchestrator, SummaryReport, summarize
from core.eligibility import EligibilityOutcome, EligibilityResolver
from core.errors import FailureKind
from utils.rate_limiter import Throttle

FIRST = "0x" + "aa" * 20
SECOND = "0x" + "bb" * 20


class CountingThrottle(Throttle):
    def __init__(self):
        self.acquired = 0

    async def acquire(self):
        self.acquired += 1


def make_orchestrator(client, config, throttle=None):
    return BatchOrchestrator(EligibilityResolver(client, config), throttle)


def test_end_to_end_example(config):
    client = FakeRPCClient({(CHECK_1, "aa" * 20): tokens(5)})
    orchestrator = make_orchestrator(client, config)

    outcomes = asyncio.run(orchestrator.resolve_all(["0x" + "AA" * 20, "not-an-address"]))

    assert outcomes[0].address == FIRST
    assert outcomes[0].is_eligible is True
    assert outcomes[0].amount == 5.0
    assert outcomes[0].error is None

    assert outcomes[1].address == "not-an-address"
    assert outcomes[1].is_eligible is False
    assert outcomes[1].amount == 0
    assert outcomes[1].error == "Invalid address format"

    assert orchestrator.summarize(outcomes) == SummaryReport(
        total=2, eligible=1, not_eligible=0, errors=1, total_amount=5.0
    )


def test_order_and_count_preserved_with_failures(config, transport_error):
    client = FakeRPCClient({
        (CHECK_2, "bb" * 20): transport_error,
        (CHECK_2, "cc" * 20): tokens(3),
    })
    addresses = [FIRST, "bogus", SECOND, "0x" + "cc" * 20, "0x12"]

    outcomes = asyncio.run(make_orchestrator(client, config).resolve_all(addresses))

    assert len(outcomes) == len(addresses)
    assert [o.address for o in outcomes] == [FIRST, "bogus", SECOND, "0x" + "cc" * 20, "0x12"]
    assert [o.failure for o in outcomes] == [
        None, FailureKind.VALIDATION, FailureKind.TRANSPORT, None, FailureKind.VALIDATION
    ]


def test_throttle_between_addresses_only(config):
    throttle = CountingThrottle()
    orchestrator = make_orchestrator(FakeRPCClient(), config, throttle)

    asyncio.run(orchestrator.resolve_all([FIRST, SECOND, FIRST]))
    assert throttle.acquired == 2

    throttle.acquired = 0
    asyncio.run(orchestrator.resolve_all([FIRST]))
    assert throttle.acquired == 0


def test_addresses_are_resolved_one_at_a_time(config):
    client = FakeRPCClient(delay=0.01)
    asyncio.run(make_orchestrator(client, config).resolve_all([FIRST, SECOND, FIRST]))
    assert client.max_in_flight == 2


def test_empty_batch(config):
    outcomes = asyncio.run(make_orchestrator(FakeRPCClient(), config).resolve_all([]))
    assert outcomes == []
    assert summarize(outcomes) == SummaryReport(0, 0, 0, 0, 0)


def test_on_result_callback_sync_and_async(config):
    seen = []

    async def async_callback(outcome, index):
        seen.append(("async", index, outcome.address))

    orchestrator = make_orchestrator(FakeRPCClient(), config)
    asyncio.run(orchestrator.resolve_all([FIRST, SECOND], on_result=async_callback))
    asyncio.run(orchestrator.resolve_all([FIRST], on_result=lambda o, i: seen.append(("sync", i, o.address))))

    assert seen == [("async", 1, FIRST), ("async", 2, SECOND), ("sync", 1, FIRST)]


def test_check_single_address(config):
    client = FakeRPCClient({(CHECK_2, "bb" * 20): tokens(2)})
    outcome = asyncio.run(make_orchestrator(client, config).check(SECOND))
    assert outcome.amount == 2.0


def test_summary_partitions_outcomes():
    outcomes = [
        EligibilityOutcome(FIRST, True, 1.5),
        EligibilityOutcome(SECOND, True, 2.5),
        EligibilityOutcome(FIRST, False, 0),
        EligibilityOutcome.failed("x", FailureKind.VALIDATION, "Invalid address format"),
        EligibilityOutcome.failed(SECOND, FailureKind.TRANSPORT, "timeout"),
    ]
    summary = summarize(outcomes)

    assert summary.eligible == 2
    assert summary.not_eligible == 1
    assert summary.errors == 2
    assert summary.eligible + summary.not_eligible + summary.errors == summary.total == 5
    assert summary.total_amount == 4.0
