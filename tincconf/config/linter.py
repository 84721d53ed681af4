"""
Configuration Linter - Validate a tinc configuration directory

Parses tinc.conf and this node's host file, runs the typed accessors over
the well-known variables and checks key file permissions.

Usage:
    tincconfctl -n NETNAME check

Severity Levels:
    CRITICAL - The daemon cannot start (missing tinc.conf, syntax errors)
    HIGH     - Values that will be rejected at lookup, exposed private keys
    MEDIUM   - Potential issues (missing host file)
    LOW      - Unknown variables
"""

import logging
import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional

from ..constants import Paths, Permissions
from .accessors import (
    get_config_bool,
    get_config_int,
    get_config_string,
    get_config_subnet,
    get_process_priority,
)
from .errors import ConfigError, ConfigIOError, TypeMismatchError, ValidationError
from .parser import check_id, host_config_path, read_config_file
from .store import ConfigEntry, ConfigStore

logger = logging.getLogger(__name__)


class LintSeverity(Enum):
    """Severity levels for lint findings."""
    CRITICAL = "critical"  # Blocks startup
    HIGH = "high"          # Rejected values, exposed keys
    MEDIUM = "medium"      # Potential issues
    LOW = "low"            # Style/best practice


class LintCategory(Enum):
    """Categories of lint findings."""
    SYNTAX = "syntax"
    TYPE = "type"
    VALUE = "value"
    PERMISSION = "permission"
    PATH = "path"
    UNKNOWN = "unknown"


@dataclass
class LintFinding:
    """A single lint finding."""
    severity: LintSeverity
    category: LintCategory
    file: str
    message: str
    variable: Optional[str] = None
    line: Optional[int] = None
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        location = self.file
        if self.line:
            location += f":{self.line}"
        if self.variable:
            location += f" {self.variable}"
        sev_colors = {
            LintSeverity.CRITICAL: "\033[91m",  # Red
            LintSeverity.HIGH: "\033[93m",      # Yellow
            LintSeverity.MEDIUM: "\033[94m",    # Blue
            LintSeverity.LOW: "\033[90m",       # Gray
        }
        reset = "\033[0m"
        color = sev_colors.get(self.severity, "")
        return f"{color}[{self.severity.value.upper()}]{reset} {location}: {self.message}"


@dataclass
class LintResult:
    """Result of linting operation."""
    findings: List[LintFinding] = field(default_factory=list)
    confbase: str = ""
    entries: int = 0
    is_valid: bool = True
    can_start: bool = True

    def count(self, severity: LintSeverity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    @property
    def critical_count(self) -> int:
        return self.count(LintSeverity.CRITICAL)

    @property
    def high_count(self) -> int:
        return self.count(LintSeverity.HIGH)

    def summary(self) -> str:
        """Generate summary string."""
        if not self.findings:
            return f"\033[92m✓ Configuration is valid ({self.entries} directives)\033[0m"

        parts = []
        colors = {
            LintSeverity.CRITICAL: "\033[91m",
            LintSeverity.HIGH: "\033[93m",
            LintSeverity.MEDIUM: "\033[94m",
            LintSeverity.LOW: "\033[90m",
        }
        for severity, color in colors.items():
            n = self.count(severity)
            if n:
                parts.append(f"{color}{n} {severity.value}\033[0m")

        summary = f"Found {len(self.findings)} issues: " + ", ".join(parts)

        if not self.can_start:
            summary += "\n\033[91m✗ tincd will NOT start with this configuration\033[0m"

        return summary


def _check_choice(choices: FrozenSet[str]) -> Callable[[ConfigEntry], None]:
    def check(cfg: ConfigEntry) -> None:
        if cfg.value.lower() not in choices:
            raise ValidationError(
                f"Invalid value `{cfg.value}', expected one of: {', '.join(sorted(choices))}",
                variable=cfg.variable, file=cfg.file, line=cfg.line,
            )
    return check


def _check_node_name(cfg: ConfigEntry) -> None:
    if not check_id(cfg.value):
        raise ValidationError(
            f"Invalid node name `{cfg.value}'",
            variable=cfg.variable, file=cfg.file, line=cfg.line,
        )


class ConfigLinter:
    """
    Validates a tinc configuration directory.

    Checks for:
    - Missing or unparsable tinc.conf
    - Values the typed accessors reject
    - Unknown variables
    - Private key files readable by group or other
    """

    BOOLEAN_VARIABLES = frozenset({
        'clampmss', 'decrementttl', 'directonly', 'hostnames', 'indirectdata',
        'pmtudiscovery', 'priorityinheritance', 'strictsubnets', 'tcponly',
        'tunnelserver',
    })

    INTEGER_VARIABLES = frozenset({
        'compression', 'keyexpire', 'macexpire', 'maxtimeout', 'pinginterval',
        'pingtimeout', 'pmtu', 'udprcvbuf', 'udpsndbuf', 'weight',
    })

    SUBNET_VARIABLES = frozenset({'subnet'})

    STRING_VARIABLES = frozenset({
        'address', 'addressfamily', 'bindtoaddress', 'bindtointerface', 'cipher',
        'connectto', 'device', 'devicetype', 'digest', 'forwarding',
        'graphdumpfile', 'interface', 'mode', 'name', 'port', 'privatekey',
        'privatekeyfile', 'processpriority', 'publickey', 'publickeyfile',
    })

    CHOICES: Dict[str, Callable[[ConfigEntry], None]] = {
        'mode': _check_choice(frozenset({'router', 'switch', 'hub'})),
        'addressfamily': _check_choice(frozenset({'ipv4', 'ipv6', 'any'})),
        'forwarding': _check_choice(frozenset({'off', 'internal', 'kernel'})),
        'name': _check_node_name,
        'connectto': _check_node_name,
    }

    def __init__(self):
        self.known = (
            self.BOOLEAN_VARIABLES | self.INTEGER_VARIABLES
            | self.SUBNET_VARIABLES | self.STRING_VARIABLES
        )

    def lint(self, confbase: str) -> LintResult:
        """
        Lint a configuration directory.

        Args:
            confbase: Directory holding tinc.conf

        Returns:
            LintResult with all findings
        """
        result = LintResult(confbase=confbase)
        server_config = os.path.join(confbase, Paths.SERVER_CONFIG)

        with ConfigStore() as store:
            if not self._read(store, server_config, result, LintSeverity.CRITICAL):
                result.is_valid = False
                result.can_start = False
                return result

            name = store.lookup_first("Name")
            if name is not None and check_id(name.value):
                host_file = host_config_path(confbase, name.value)
                self._read(store, host_file, result, LintSeverity.MEDIUM)

            result.entries = len(store)

            for cfg in store:
                self._check_entry(cfg, result)

            self._check_process_priority(store, result)
            self._check_file_permissions(confbase, store, server_config, result)

        result.can_start = result.critical_count == 0
        result.is_valid = len(result.findings) == 0
        return result

    def _read(self, store: ConfigStore, path: str, result: LintResult,
              missing_severity: LintSeverity) -> bool:
        try:
            read_config_file(store, path)
            return True
        except ConfigIOError as e:
            result.findings.append(LintFinding(
                severity=missing_severity,
                category=LintCategory.PATH,
                file=path,
                message=str(e),
            ))
        except ConfigError as e:
            result.findings.append(LintFinding(
                severity=LintSeverity.CRITICAL,
                category=LintCategory.SYNTAX,
                file=path,
                variable=e.variable,
                line=e.line,
                message=str(e),
                suggestion="Every directive needs a value: Variable = value",
            ))
        return False

    def _check_entry(self, cfg: ConfigEntry, result: LintResult) -> None:
        variable = cfg.variable.lower()

        if variable not in self.known:
            result.findings.append(LintFinding(
                severity=LintSeverity.LOW,
                category=LintCategory.UNKNOWN,
                file=cfg.file,
                line=cfg.line,
                variable=cfg.variable,
                message=f"Unknown configuration variable {cfg.variable}",
            ))
            return

        try:
            if variable in self.BOOLEAN_VARIABLES:
                get_config_bool(cfg)
            elif variable in self.INTEGER_VARIABLES:
                get_config_int(cfg)
            elif variable in self.SUBNET_VARIABLES:
                get_config_subnet(cfg)
            else:
                get_config_string(cfg)

            check = self.CHOICES.get(variable)
            if check is not None:
                check(cfg)
        except TypeMismatchError as e:
            self._add_value_finding(result, cfg, LintCategory.TYPE, e)
        except ValidationError as e:
            self._add_value_finding(result, cfg, LintCategory.VALUE, e)

    def _add_value_finding(self, result: LintResult, cfg: ConfigEntry,
                           category: LintCategory, error: ConfigError) -> None:
        result.findings.append(LintFinding(
            severity=LintSeverity.HIGH,
            category=category,
            file=cfg.file,
            line=cfg.line,
            variable=cfg.variable,
            message=str(error),
        ))

    def _check_process_priority(self, store: ConfigStore, result: LintResult) -> None:
        try:
            get_process_priority(store)
        except ValidationError as e:
            self._add_value_finding(result, store.lookup_first("ProcessPriority"),
                                    LintCategory.VALUE, e)

    def _check_file_permissions(self, confbase: str, store: ConfigStore,
                                server_config: str, result: LintResult) -> None:
        """Check permissions on tinc.conf and the private key."""
        key_file = get_config_string(store.lookup_first("PrivateKeyFile"))
        if key_file is None:
            key_file = os.path.join(confbase, Paths.PRIVATE_KEY)

        try:
            st = os.stat(server_config)
            if st.st_mode & stat.S_IWOTH:
                result.findings.append(LintFinding(
                    severity=LintSeverity.HIGH,
                    category=LintCategory.PERMISSION,
                    file=server_config,
                    message=f"Configuration file is world-writable: {server_config}",
                    suggestion="Remove world-write permission: chmod o-w",
                ))
        except OSError as e:
            logger.debug(f"Cannot stat {server_config}: {e}")

        try:
            st = os.stat(key_file)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.debug(f"Cannot stat {key_file}: {e}")
            return

        if st.st_mode & Permissions.GROUP_OTHER_MASK:
            result.findings.append(LintFinding(
                severity=LintSeverity.HIGH,
                category=LintCategory.PERMISSION,
                file=key_file,
                variable="PrivateKeyFile",
                message=f"Private key is accessible by group or other: {key_file}",
                suggestion=f"chmod {Permissions.SECURE_FILE:o} {key_file}",
            ))


def lint_config(confbase: str, quiet: bool = False) -> int:
    """
    Lint a configuration directory and return an exit code.

    Returns:
        0 if valid, 1 if high severity issues, 2 if tincd cannot start
    """
    linter = ConfigLinter()
    result = linter.lint(confbase)

    if not quiet:
        if result.findings:
            print(f"Linting {result.confbase}:\n")
            for finding in result.findings:
                print(f"  {finding}")
                if finding.suggestion:
                    print(f"    \033[90m→ {finding.suggestion}\033[0m")
            print()

        print(result.summary())

    if not result.can_start:
        return 2
    elif result.high_count > 0:
        return 1
    return 0


__all__ = [
    'LintSeverity',
    'LintCategory',
    'LintFinding',
    'LintResult',
    'ConfigLinter',
    'lint_config',
]
