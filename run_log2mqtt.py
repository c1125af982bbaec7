#!/usr/bin/env python3
"""
log2mqtt Forwarder - Entry Point
================================

Reads lines from stdin and forwards each one to the MQTT broker as a log
envelope.

Usage:
    tail -F app.log | python run_log2mqtt.py --config config/log2mqtt.yaml
    some_job 2>&1 | python run_log2mqtt.py --app nightly-job --tag region=us

Lifecycle:
    1. Setup logging (console)
    2. Load configuration (YAML or flags)
    3. Create logger handle
    4. Forward stdin until EOF
    5. Close handle

Signals:
    - SIGTERM: Graceful shutdown
    - SIGINT (Ctrl+C): Graceful shutdown
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from log2mqtt import Log2Mqtt, LoggerConfig, new_logger
from log2mqtt.config import read_yaml


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Setup root logging for the forwarder process."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    return logging.getLogger(__name__)


def parse_tags(pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse ``key=value`` flags into a dict.

    Raises:
        ValueError: If a pair has no '=' or an empty key
    """
    tags = {}
    for pair in pairs or []:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"Invalid tag {pair!r}, expected key=value")
        tags[key] = value
    return tags


def build_config(args: argparse.Namespace) -> LoggerConfig:
    """Configuration from --config, overridden by explicit flags."""
    data = read_yaml(args.config) if args.config else {}

    if args.app:
        data['application_name'] = args.app
    if args.broker:
        data['broker_address'] = args.broker
    if args.tag:
        data['extra_tags'] = {**(data.get('extra_tags') or {}), **parse_tags(args.tag)}

    return LoggerConfig.from_dict(data)


def forward(log: Log2Mqtt, stream: TextIO, severity: str = "info") -> int:
    """
    Forward every non-empty line of ``stream``.

    Lines are sent verbatim (no template interpolation), except at
    trace/error severity where they go through the matching call with no
    arguments.

    Returns:
        Number of lines forwarded
    """
    emit = {
        'trace': log.trace,
        'info': log.println,
        'error': log.error,
    }[severity]

    count = 0
    for line in stream:
        line = line.rstrip('\n')
        if not line:
            continue
        emit(line)
        count += 1
    return count


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="log2mqtt - forward stdin lines to an MQTT broker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use a YAML config
  python run_log2mqtt.py --config config/log2mqtt.yaml < app.log

  # Flags only
  python run_log2mqtt.py --app billing --broker mqtt.internal:1883 --tag region=us
        """
    )

    parser.add_argument('--config', type=Path, help='Path to logger configuration YAML file')
    parser.add_argument('--app', help='Application name (overrides config)')
    parser.add_argument('--broker', help='Broker address host[:port] (overrides config)')
    parser.add_argument('--tag', action='append', help='Extra tag key=value (repeatable)')
    parser.add_argument(
        '--severity',
        choices=['trace', 'info', 'error'],
        default='info',
        help='Severity of forwarded lines (default: info)'
    )
    parser.add_argument('--verbose', action='store_true', help='Log forwarder diagnostics at DEBUG')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logger = setup_logging(args.verbose)

    if args.config and not args.config.exists():
        print(f"❌ Error: Configuration file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)

    log = new_logger(config)

    def _signal_handler(signum, frame):
        logger.info(f"Received signal {signal.Signals(signum).name}, shutting down")
        sys.exit(0)

    signal.signal(signal.SIGTERM, _signal_handler)
    signal.signal(signal.SIGINT, _signal_handler)

    with log:
        count = forward(log, sys.stdin, args.severity)
    logger.info(f"Forwarded {count} lines")


if __name__ == '__main__':
    main()
