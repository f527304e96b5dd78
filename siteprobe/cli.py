"""
Site Probe CLI

Command-line interface for one-off monitoring passes.

Exit codes: 0 when every target is up, 1 when any target is down,
2 on usage errors or malformed URLs.
"""

import asyncio
import argparse
import json
import sys
from typing import List, Optional, Sequence
import logging

from pydantic import ValidationError

from .config import EngineSettings
from .errors import InvalidTargetError
from .logging_utils import configure_logging
from .orchestrator import SiteMonitorOrchestrator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DOWN = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser"""
    parser = argparse.ArgumentParser(
        prog='siteprobe',
        description='Site health probing - ping, GET, HEAD and TLS certificate checks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check one site
  siteprobe check https://example.com

  # Check several sites with a 5 second timeout
  siteprobe check https://site1.com https://site2.com --timeout-ms 5000

  # Check sites listed in a file and save JSON results
  siteprobe check -f targets.txt -o results.json
        """
    )

    parser.add_argument(
        'command',
        choices=['check'],
        help='Command to execute'
    )

    parser.add_argument(
        'targets',
        nargs='*',
        help='Target URLs to check'
    )

    parser.add_argument(
        '-f', '--file',
        help='File containing target URLs (one per line, # comments allowed)'
    )

    parser.add_argument(
        '--worker-id',
        help='Worker identifier tagged onto results (default: SITEPROBE_WORKER_ID or host name)'
    )

    parser.add_argument(
        '--timeout-ms',
        type=int,
        help='Per-probe timeout in milliseconds (default: SITEPROBE_TIMEOUT_MS or 30000)'
    )

    parser.add_argument(
        '--max-concurrency',
        type=int,
        help='Maximum URLs checked at once (default: unbounded)'
    )

    parser.add_argument(
        '--privileged-ping',
        action='store_true',
        default=None,
        help='Use raw ICMP sockets (requires root)'
    )

    parser.add_argument(
        '-o', '--output',
        help='Output file (JSON format)'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print JSON results instead of a text report'
    )

    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit logs as JSON lines'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    return parser


def load_targets(args) -> List[str]:
    """Load targets from command line or file"""
    targets = list(args.targets or [])

    if args.file:
        with open(args.file, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    targets.append(line)

    return targets


def display_results(results, stats, verbose=False):
    """Display monitoring results to console"""
    print("\n" + "="*80)
    print("SITE PROBE RESULTS")
    print("="*80)

    for idx, result in enumerate(results, 1):
        state = "UP" if result.is_up else "DOWN"
        print(f"\n  [{idx}] {result.url} - {state}")
        print(f"      Checked At: {result.checked_at.isoformat()} (worker {result.worker_id})")

        ping = result.ping_check
        if ping.is_up:
            print(f"      Ping: {ping.response_time_ms:.2f} ms")
        else:
            print(f"      Ping: FAILED - {ping.error}")

        for label, check in (("GET", result.get_check), ("HEAD", result.head_check)):
            if check.error:
                print(f"      {label}: FAILED - {check.error}")
            else:
                print(f"      {label}: {check.status_code} in {check.response_time_ms:.2f} ms")

        tls = result.get_check.tls_info
        if tls:
            print(f"      TLS Certificate:")
            print(f"        Issuer: {tls.issuer}")
            print(f"        Expires: {tls.valid_to.isoformat()}")
            print(f"        Days Until Expiry: {tls.days_until_expiry}")
            if tls.is_expired:
                print(f"        WARNING: Certificate is EXPIRED")

        if verbose and result.get_check.headers:
            print(f"      Headers:")
            for name, value in result.get_check.headers.items():
                print(f"        {name}: {value}")

    print(f"\nSummary: {stats.up_count}/{stats.total_targets} up, "
          f"{stats.expired_count} expired cert(s), "
          f"{stats.expiring_soon_count} expiring soon")
    if stats.avg_response_time_ms is not None:
        print(f"Avg Response Time: {stats.avg_response_time_ms:.2f} ms")
    print("="*80 + "\n")


def results_to_json(results) -> str:
    return json.dumps(
        [r.model_dump(mode="json", by_alias=True) for r in results],
        indent=2,
    )


def save_results(results, output_file):
    """Save results to JSON file"""
    with open(output_file, 'w') as f:
        f.write(results_to_json(results))
    logger.info(f"Results saved to {output_file}")


async def check_command(args, settings: EngineSettings) -> int:
    """Execute check command"""
    try:
        targets = load_targets(args)
    except OSError as e:
        logger.error(f"Failed to read targets from file: {e}")
        return EXIT_USAGE

    if not targets:
        logger.error("No targets specified. Use targets as arguments or -f file")
        return EXIT_USAGE

    config = settings.to_engine_config(
        worker_id=args.worker_id,
        timeout_ms=args.timeout_ms,
        max_concurrency=args.max_concurrency,
        ping_privileged=args.privileged_ping,
    )
    orchestrator = SiteMonitorOrchestrator(config)

    try:
        results, stats = await orchestrator.monitor_urls_with_stats(targets)
    except InvalidTargetError as e:
        logger.error(str(e))
        return EXIT_USAGE

    if args.json:
        print(results_to_json(results))
    else:
        display_results(results, stats, args.verbose)

    if args.output:
        save_results(results, args.output)

    return EXIT_OK if stats.down_count == 0 else EXIT_DOWN


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        configure_logging(json_output=args.json_logs)
        logger.error(f"Invalid environment configuration: {e}")
        return EXIT_USAGE

    level = "DEBUG" if args.verbose else settings.log_level
    configure_logging(level, json_output=args.json_logs or settings.log_json)

    try:
        return asyncio.run(check_command(args, settings))
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_USAGE


if __name__ == '__main__':
    sys.exit(main())
