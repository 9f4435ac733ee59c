"""
RPC client for read-only contract calls with endpoint failover
"""
import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

import aiohttp
from web3 import AsyncWeb3, AsyncHTTPProvider

from core.errors import TransportError
from utils.logger import get_logger

logger = get_logger(__name__)


class RPCClient(ABC):
    """Issues eth_call requests and returns the raw result bytes"""

    @abstractmethod
    async def call(self, contract_address: str, data: bytes) -> bytes:
        """
        Call a view method of contract_address with the given call data

        Raises TransportError if the call could not be completed.
        Implementations must allow several calls in flight at once.
        """

    async def close(self):
        """Release network resources"""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


@dataclass
class EndpointHealth:
    """Track health of an RPC endpoint"""
    url: str
    failures: int = 0
    last_failure: float = 0
    last_success: float = 0
    avg_latency_ms: float = 0
    
    def record_success(self, latency_ms: float):
        self.last_success = time.time()
        self.failures = 0
        # Exponential moving average
        if self.avg_latency_ms == 0:
            self.avg_latency_ms = latency_ms
        else:
            self.avg_latency_ms = 0.8 * self.avg_latency_ms + 0.2 * latency_ms
    
    def record_failure(self):
        self.failures += 1
        self.last_failure = time.time()
    
    def is_healthy(self) -> bool:
        # Consider unhealthy if 3+ failures in last 60 seconds
        if self.failures >= 3 and time.time() - self.last_failure < 60:
            return False
        return True


class Web3RPCClient(RPCClient):
    """
    eth_call over one or more JSON-RPC endpoints
    Tries the fastest healthy endpoint first and fails over to the others
    """
    
    def __init__(self, endpoints: list[str], call_timeout: float = 15.0):
        self.endpoints = [url for url in endpoints if url]
        if not self.endpoints:
            raise ValueError("at least one RPC endpoint is required")
        self.call_timeout = call_timeout
        self._web3_instances: dict[str, AsyncWeb3] = {}
        self._endpoint_health: dict[str, EndpointHealth] = {
            url: EndpointHealth(url=url) for url in self.endpoints
        }
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Shared session so both calls of an address reuse pooled connections"""
        async with self._session_lock:
            if self._session is None or self._session.closed:
                connector = aiohttp.TCPConnector(
                    use_dns_cache=True,
                    ttl_dns_cache=600,
                    limit=20,
                    enable_cleanup_closed=True,
                )
                self._session = aiohttp.ClientSession(
                    connector=connector,
                    timeout=aiohttp.ClientTimeout(total=self.call_timeout, connect=10)
                )
        return self._session
    
    async def _get_web3(self, url: str) -> AsyncWeb3:
        """Get or create a Web3 instance for a specific endpoint"""
        if url not in self._web3_instances:
            session = await self._get_session()
            provider = AsyncHTTPProvider(
                url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=self.call_timeout)}
            )
            await provider.cache_async_session(session)
            self._web3_instances[url] = AsyncWeb3(provider)
        return self._web3_instances[url]
    
    def _get_best_endpoint(self, tried: set[str] | None = None) -> str:
        """Get the best available endpoint not tried yet"""
        tried = tried or set()
        candidates = [url for url in self.endpoints if url not in tried] or self.endpoints
        healthy_endpoints = []
        
        for url in candidates:
            health = self._endpoint_health[url]
            if health.is_healthy():
                healthy_endpoints.append((url, health.avg_latency_ms or float('inf')))
        
        if not healthy_endpoints:
            # All unhealthy, reset and use first
            for health in self._endpoint_health.values():
                health.failures = 0
            return candidates[0]
        
        # Sort by latency, return fastest
        healthy_endpoints.sort(key=lambda x: x[1])
        return healthy_endpoints[0][0]
    
    async def call(self, contract_address: str, data: bytes) -> bytes:
        """Execute eth_call with automatic failover"""
        last_error: Exception | None = None
        tried: set[str] = set()
        
        for _ in range(len(self.endpoints)):
            url = self._get_best_endpoint(tried)
            tried.add(url)
            web3 = await self._get_web3(url)
            tx = {
                "to": AsyncWeb3.to_checksum_address(contract_address),
                "data": AsyncWeb3.to_hex(data),
            }
            
            start_time = time.time()
            try:
                result = await asyncio.wait_for(
                    web3.eth.call(tx, "latest"),
                    timeout=self.call_timeout
                )
                
                latency_ms = (time.time() - start_time) * 1000
                self._endpoint_health[url].record_success(latency_ms)
                return bytes(result)
                
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._endpoint_health[url].record_failure()
                logger.debug(f"eth_call via {url} failed: {e!r}")
                last_error = e
                continue
        
        raise TransportError(f"All RPC endpoints failed: {last_error}") from last_error

    async def close(self):
        """Close all Web3 providers and the shared session"""
        for url, w3 in self._web3_instances.items():
            disconnect = getattr(w3.provider, "disconnect", None)
            if disconnect is None:
                continue
            try:
                await disconnect()
            except Exception as e:
                logger.debug(f"Error disconnecting provider {url}: {e}")
        self._web3_instances.clear()
        
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
