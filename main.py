#!/usr/bin/env python3
"""
Token Eligibility Checker
=========================
Checks which addresses can claim a token allocation by calling the
two eligibility views of the distribution contract

Usage:
    python main.py [ADDRESS ...] [--file addresses.txt] [--rpc URL] [--delay SECONDS]
"""
import argparse
import asyncio
import sys

from config.contracts import ADDRESSES_TO_CHECK
from config.settings import LOG_LEVEL, CheckerConfig, load_config
from core.batch import BatchOrchestrator
from core.eligibility import EligibilityResolver
from core.errors import ConfigError
from core.rpc_client import RPCClient, Web3RPCClient
from ui.terminal import TerminalReporter
from utils.logger import console, setup_logging, get_logger
from utils.rate_limiter import build_throttle

logger = get_logger(__name__)


def read_address_file(path: str) -> list[str]:
    """One address per line; blank lines and # comments are ignored"""
    addresses = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.split("#", 1)[0].strip()
            if line:
                addresses.append(line)
    return addresses


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check token allocation eligibility for addresses")
    parser.add_argument("addresses", nargs="*", help="Addresses to check (default: built-in list)")
    parser.add_argument("--file", help="File with one address per line")
    parser.add_argument("--rpc", action="append", help="RPC endpoint URL (repeat for failover)")
    parser.add_argument("--contract", help="Eligibility contract address")
    parser.add_argument("--delay", type=float, help="Seconds to wait between addresses")
    parser.add_argument("--timeout", type=float, help="Per-call timeout in seconds")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: %(default)s)")
    return parser.parse_args(argv)


async def run(addresses: list[str], config: CheckerConfig, client: RPCClient, reporter: TerminalReporter):
    """Check the addresses and print the results"""
    resolver = EligibilityResolver(client, config)
    orchestrator = BatchOrchestrator(resolver, build_throttle(config))
    
    if len(addresses) == 1:
        outcome = await orchestrator.check(addresses[0])
        reporter.print_result(outcome)
        return [outcome]
    
    outcomes = await orchestrator.resolve_all(addresses, on_result=reporter.print_result)
    reporter.print_summary(orchestrator.summarize(outcomes))
    return outcomes


async def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    setup_logging(args.log_level)
    
    try:
        config = load_config(
            rpc_endpoints=args.rpc,
            contract_address=args.contract,
            request_delay=args.delay,
            call_timeout=args.timeout,
        )
        addresses = list(args.addresses)
        if args.file:
            addresses.extend(read_address_file(args.file))
    except (ConfigError, OSError) as e:
        logger.error(f"[red]Configuration error: {e}[/red]")
        return 2
    
    if not addresses:
        addresses = list(ADDRESSES_TO_CHECK)
    
    reporter = TerminalReporter(console=console, token_symbol=config.token_symbol)
    reporter.print_header(f"{config.token_symbol} Token Eligibility Checker")
    
    client = Web3RPCClient(config.rpc_endpoints, call_timeout=config.call_timeout)
    try:
        await run(addresses, config, client, reporter)
    except Exception as e:
        logger.exception(f"[red]Fatal error: {e}[/red]")
        return 1
    finally:
        await client.close()
    
    return 0


def cli():
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
