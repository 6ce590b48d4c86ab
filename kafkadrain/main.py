#!/usr/bin/env python3
"""
Main entry point for the kafkadrain CLI.

Usage:
    # Drain broker 1 onto all other active brokers
    kafkadrain broker_drain 1
    
    # Drain only one topic onto brokers 4 and 5, writing the plan to a file
    kafkadrain broker_drain 1 --topic events --brokers 4,5 --output plan.json
"""

import argparse
import sys
from typing import List, Optional

from kafkadrain import __version__
from kafkadrain.commands import categories, get_command, COMMAND_CLASSES
from kafkadrain.utils.config import Config, ConfigError
from kafkadrain.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def command_listing() -> str:
    """Banner of every command, grouped by category."""
    lines = []
    for category, classes in categories().items():
        lines.append(f"**** {category.upper()} COMMANDS ****")
        for cls in classes:
            lines.append(f"  {cls.banner}")
        lines.append("")
    lines.append("Use '--help' with any of the commands to see their options.")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-parser per command."""
    parser = argparse.ArgumentParser(
        prog="kafkadrain",
        description="kafkadrain - reassign partitions away from a broker",
        epilog=command_listing(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    
    parser.add_argument(
        '-c', '--config',
        type=str,
        help='Configuration file to use'
    )
    
    parser.add_argument(
        '-z', '--zookeeper',
        type=str,
        help='The zookeeper connection string in the form <host>:<port>,...'
    )
    
    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING)'
    )
    
    parser.add_argument(
        '--log-format',
        type=str,
        choices=['console', 'json'],
        help='Log output format (default: console)'
    )
    
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    
    for cls in COMMAND_CLASSES:
        subparser = subparsers.add_parser(
            cls.name,
            aliases=list(cls.aliases),
            help=cls.description,
            description=cls.description,
        )
        cls().add_arguments(subparser)
    
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Load configuration and merge command-line overrides."""
    config = Config(args.config)
    config.merge_options({
        "zookeeper.hosts": args.zookeeper,
        "logging.level": args.log_level,
        "logging.format": args.log_format,
    })
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.
    
    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
    
    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if not args.command:
        parser.print_help()
        return 1
    
    try:
        config = load_config(args)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 1
    
    configure_logging(
        log_level=config.get("logging.level", "WARNING"),
        log_format=config.get("logging.format", "console"),
        log_output=config.get("logging.output", "stderr"),
    )
    
    command_cls = get_command(args.command)
    
    if args.command in command_cls.aliases:
        logger.warning(
            "Command alias is deprecated",
            alias=args.command,
            command=command_cls.name,
        )
    
    logger.debug(
        "Running command",
        command=command_cls.name,
        config_file=config.source,
    )
    
    return command_cls().run(args, config)


if __name__ == '__main__':
    sys.exit(main())
