import asyncio

import pytest

from config.settings import CheckerConfig
from core.errors import TransportError
from core.rpc_client import RPCClient

CHECK_1 = bytes.fromhex("6e21fc87")
CHECK_2 = bytes.fromhex("cc29c923")


def uint256(value: int) -> bytes:
    return value.to_bytes(32, "big")


def tokens(amount: int) -> bytes:
    return uint256(amount * 10**18)


class FakeRPCClient(RPCClient):
    """
    Answers eth_call from a table keyed by (selector, lowercase address)
    Values may be bytes, str, or an exception instance to raise
    """

    def __init__(self, responses=None, default=b"\x00" * 32, delay: float = 0):
        self.responses = responses or {}
        self.default = default
        self.delay = delay
        self.calls: list[tuple[str, bytes]] = []
        self.cancelled = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def call(self, contract_address: str, data: bytes) -> bytes:
        self.calls.append((contract_address, data))
        selector, address = data[:4], data[-20:].hex()
        response = self.responses.get((selector, address), self.default)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if isinstance(response, Exception):
                raise response
            if self.delay:
                await asyncio.sleep(self.delay)
            return response
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1


@pytest.fixture
def config():
    return CheckerConfig(
        rpc_endpoints=["http://localhost:8545"],
        request_delay=0,
    )


@pytest.fixture
def transport_error():
    return TransportError("All RPC endpoints failed: connection refused")
