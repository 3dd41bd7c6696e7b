#!/usr/bin/env python3
"""
Ruff formatting helper for the metabase-export code base.

USAGE:
    # Format the package, tests and scripts in place
    python formatting_ruff.py

    # Verify formatting without changing files (CI)
    python formatting_ruff.py --check

    # Limit to given paths
    python formatting_ruff.py --path metabase_export/process
"""

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List

DEFAULT_PATHS = ("metabase_export", "tests", "main.py", "formatting_ruff.py")


def find_ruff() -> str:
    """Prefer the ruff installed next to the running interpreter."""
    ruff_path = Path(sys.executable).parent / "ruff"
    return str(ruff_path) if ruff_path.exists() else "ruff"


def run_ruff_format(paths: List[str], check_only: bool = False) -> int:
    """Run ``ruff format`` on paths and return its exit code."""
    cmd = [find_ruff(), "format"]
    if check_only:
        cmd.extend(["--check", "--diff"])
    cmd.extend(paths)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        print(f"Error: ruff not found at {cmd[0]}. Install with: pip install ruff")
        return 1

    if result.stdout:
        print(result.stdout)
    if result.stderr:
        print(result.stderr, file=sys.stderr)
    return result.returncode


def main(argv=None):
    parser = argparse.ArgumentParser(description="Format metabase-export with ruff")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report files that need formatting; exit 1 if any do",
    )
    parser.add_argument(
        "--path",
        type=str,
        action="append",
        help="Path to process (repeatable). Default: package, tests and scripts",
    )
    args = parser.parse_args(argv)

    repo_root = Path(__file__).parent
    paths = [str(repo_root / p) for p in (args.path or DEFAULT_PATHS)]
    paths = [p for p in paths if Path(p).exists()]
    if not paths:
        print("Error: No valid paths to format")
        return 1

    print("=" * 60)
    print("Ruff format" + (" --check" if args.check else ""))
    print("=" * 60)
    returncode = run_ruff_format(paths, check_only=args.check)

    if returncode == 0:
        print("Formatting OK")
    elif args.check:
        print("Some files need formatting. Run: python formatting_ruff.py")
    return returncode


if __name__ == "__main__":
    sys.exit(main())
