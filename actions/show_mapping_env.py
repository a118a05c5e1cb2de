#!/usr/bin/env python3
"""
Show how each mapping-handler environment variable resolves.

**Conceptual**: The runtime configuration object never prints its values.
When an operator needs to know what the process will actually use, this
script reports the raw stage instead: for every declared variable, where its
text came from and what it parsed to. Every variable is checked, so all
misconfigurations show up in one run.

**Usage**:
    # Report every variable
    python actions/show_mapping_env.py

    # Only report variables that fail to parse
    python actions/show_mapping_env.py --check

    # Also log resolution details
    python actions/show_mapping_env.py --verbose

**Output columns**:
    NAME    SOURCE (env | default | unset)    VALUE or ERROR

**Exit codes**:
    0 - every variable resolved
    1 - at least one variable is missing or invalid
"""

import argparse
import sys
from pathlib import Path
from typing import List, Mapping, Optional

# Add project root to Python path so we can import mapping_env modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from mapping_env.config import settings as _settings  # noqa: F401  (loads .env)
from mapping_env.env.loader import EnvVarReport, describe_env
from mapping_env.env.mappings import RawMappingEnvVars
from mapping_env.utils.logging_setup import configure_logging


def format_report(report: EnvVarReport) -> str:
    """
    Render one variable as a single line.

    Example:
        >>> format_report(EnvVarReport("GRAPH_IPFS_TIMEOUT", "default", "30", 30))
        'GRAPH_IPFS_TIMEOUT  default  30'
    """
    if report.error is not None:
        outcome = f"ERROR: {report.error}"
    elif report.value is None:
        outcome = "-"
    else:
        outcome = str(report.value)
    return f"{report.name}  {report.source}  {outcome}"


def collect_reports(env: Optional[Mapping[str, str]] = None) -> List[EnvVarReport]:
    """Resolve every raw mapping variable against `env` (default: os.environ)."""
    return describe_env(RawMappingEnvVars, env)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Show how mapping-handler environment variables resolve."
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only print variables that fail to resolve",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level (default: LOG_LEVEL or INFO)",
    )
    args = parser.parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose else None)

    all_reports = collect_reports()
    shown = [r for r in all_reports if not r.ok] if args.check else all_reports

    for report in shown:
        print(format_report(report))

    failures = sum(1 for r in all_reports if not r.ok)
    print("\n" + "=" * 60)
    print(f"Resolved: {len(all_reports) - failures}/{len(all_reports)} variables")
    print("=" * 60)

    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
