#!/usr/bin/env python3
"""
tincconfctl - Configuration tool for tinc networks

Reads the same configuration files tincd reads and lets an operator check,
inspect and query them, and generate the node's RSA key pair.

Usage:
    tincconfctl -n myvpn check
    tincconfctl -n myvpn dump --format json
    tincconfctl -n myvpn get ConnectTo
    tincconfctl -n myvpn get Subnet --type subnet
    tincconfctl -c /etc/tinc/myvpn generate-keys 4096

Environment Variables:
    TINC_CONFDIR        - Base configuration directory (default /etc)
    TINC_LOCALSTATEDIR  - Base state directory (default /var)
    TINC_VERBOSE        - Enable verbose logging
    TINC_TRACE          - Log every directive as it is read
"""

import argparse
import json
import sys
from typing import Callable, Dict, List, Optional

import yaml

from tincconf.config import (
    ConfigError,
    ConfigStore,
    get_config_address,
    get_config_bool,
    get_config_int,
    get_config_string,
    get_config_subnet,
    lint_config,
    make_names,
    read_host_config,
    read_server_config,
)
from tincconf.config.names import Names
from tincconf.constants import Limits
from tincconf.keys import generate_rsa_keys
from tincconf.logging_config import LogLevel, configure_from_environment, get_logger, is_verbose
from tincconf.utils.error_handling import get_error_aggregator

logger = get_logger('tincconf.cli')


# ANSI color codes
class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    GRAY = '\033[90m'

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output."""
        cls.RESET = ''
        cls.BOLD = ''
        cls.RED = ''
        cls.GREEN = ''
        cls.GRAY = ''


def print_error(msg: str) -> None:
    """Print error message."""
    print(f"{Colors.RED}Error:{Colors.RESET} {msg}", file=sys.stderr)


def print_success(msg: str) -> None:
    """Print success message."""
    print(f"{Colors.GREEN}✓{Colors.RESET} {msg}")


def _format_address(value) -> str:
    return " ".join(sorted({info[4][0] for info in value}))


ACCESSORS: Dict[str, Callable] = {
    'string': get_config_string,
    'bool': get_config_bool,
    'int': get_config_int,
    'address': get_config_address,
    'subnet': get_config_subnet,
}


class TincConfCLI:
    """CLI handler for configuration commands."""

    def __init__(self, names: Names):
        self.names = names

    def _load(self, store: ConfigStore, host: Optional[str] = None) -> bool:
        try:
            read_server_config(store, self.names.confbase)
            if host:
                read_host_config(store, self.names.confbase, host)
        except ConfigError as e:
            print_error(str(e))
            return False
        return True

    def cmd_check(self, args: argparse.Namespace) -> int:
        """Lint the configuration directory."""
        return lint_config(self.names.confbase, quiet=args.quiet)

    def cmd_dump(self, args: argparse.Namespace) -> int:
        """Print every directive in lookup order."""
        with ConfigStore() as store:
            if not self._load(store, args.host):
                return 1

            entries: List[Dict] = [
                {
                    'variable': cfg.variable,
                    'value': cfg.value,
                    'file': cfg.file,
                    'line': cfg.line,
                }
                for cfg in store
            ]

        if args.format == 'json':
            print(json.dumps(entries, indent=2))
        elif args.format == 'yaml':
            print(yaml.safe_dump(entries, sort_keys=False), end='')
        else:
            for e in entries:
                print(f"{e['variable']} = {e['value']}  "
                      f"{Colors.GRAY}# {e['file']}:{e['line']}{Colors.RESET}")
        return 0

    def cmd_get(self, args: argparse.Namespace) -> int:
        """Print every value of one variable, converted to the requested type."""
        accessor = ACCESSORS[args.type]
        found = 0
        errors = 0

        with ConfigStore() as store:
            if not self._load(store, args.host):
                return 1

            for cfg in store.lookup_all(args.variable):
                found += 1
                try:
                    value = accessor(cfg)
                except ConfigError:
                    # already reported through the log
                    errors += 1
                    continue

                if args.type == 'address':
                    value = _format_address(value)
                elif args.type == 'bool':
                    value = 'yes' if value else 'no'
                print(value)

        if not found:
            logger.info(f"{args.variable} is not set")
            return 1
        return 1 if errors else 0

    def cmd_generate_keys(self, args: argparse.Namespace) -> int:
        """Generate an RSA key pair for this node."""
        with ConfigStore() as store:
            try:
                read_server_config(store, self.names.confbase)
            except ConfigError:
                # Name is optional for key generation
                logger.notice("Continuing without server configuration")

            try:
                files = generate_rsa_keys(self.names, store, bits=args.bits)
            except (ConfigError, ValueError) as e:
                print_error(str(e))
                return 1

        print_success(f"Private key written to {files.private_key}")
        print_success(f"Public key written to {files.public_key}")
        return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tincconfctl',
        description='Check, inspect and query tinc configuration',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tincconfctl -n myvpn check
  tincconfctl -n myvpn dump --format yaml
  tincconfctl -n myvpn get ConnectTo
  tincconfctl -n myvpn generate-keys 4096
        """
    )

    parser.add_argument('-n', '--net', metavar='NETNAME', help='Use network NETNAME')
    parser.add_argument('-c', '--config', metavar='DIR',
                        help='Read configuration options from DIR')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('--trace', action='store_true', help='Log every directive as it is read')
    parser.add_argument('--logfile', metavar='FILE', help='Also write log entries to FILE')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    check_parser = subparsers.add_parser('check', help='Lint the configuration')
    check_parser.add_argument('-q', '--quiet', action='store_true', help='Only set exit code')

    dump_parser = subparsers.add_parser('dump', help='Print all directives')
    dump_parser.add_argument('--format', choices=['text', 'json', 'yaml'], default='text')
    dump_parser.add_argument('--host', metavar='NAME', help='Also read hosts/NAME')

    get_parser = subparsers.add_parser('get', help='Print the values of a variable')
    get_parser.add_argument('variable')
    get_parser.add_argument('--type', choices=sorted(ACCESSORS), default='string')
    get_parser.add_argument('--host', metavar='NAME', help='Also read hosts/NAME')

    keys_parser = subparsers.add_parser('generate-keys', help='Generate an RSA key pair')
    keys_parser.add_argument('bits', nargs='?', type=int, default=Limits.RSA_DEFAULT_BITS)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color or not sys.stdout.isatty():
        Colors.disable()

    configure_from_environment(verbose=args.verbose, trace=args.trace, log_file=args.logfile)

    if not args.command:
        parser.print_help()
        return 0

    cli = TincConfCLI(make_names(args.net, args.config))

    command_map = {
        'check': cli.cmd_check,
        'dump': cli.cmd_dump,
        'get': cli.cmd_get,
        'generate-keys': cli.cmd_generate_keys,
    }

    status = command_map[args.command](args)

    if is_verbose():
        summary = get_error_aggregator().get_error_summary()
        if summary['total_errors']:
            logger.log_with_data(LogLevel.VERBOSE.value,
                                 f"{summary['total_errors']} configuration errors reported",
                                 summary['by_category'])
    return status


if __name__ == '__main__':
    sys.exit(main())
