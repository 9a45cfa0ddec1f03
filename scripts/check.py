#!/usr/bin/env python
"""Run formatting, type and lint checks on the bayeux package, then the tests.

Extra arguments are passed through to pytest, e.g.::

    python scripts/check.py -k registry
"""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
PACKAGE = str(ROOT / "src" / "bayeux")

CHECKS = [
    ("black", ["black", "--check", PACKAGE]),
    ("mypy", ["mypy", PACKAGE]),
    ("ruff", ["ruff", "check", PACKAGE]),
]


def run_module(name: str, args: list[str]) -> int:
    """Run ``python -m <args>`` from the repository root and return its exit code."""
    print(f"\n=== {name} ===", flush=True)
    return subprocess.run([sys.executable, "-m", *args], cwd=ROOT).returncode


def main(pytest_args: list[str]) -> int:
    for name, args in CHECKS:
        exit_code = run_module(name, args)
        if exit_code != 0:
            print(f"{name} failed")
            return exit_code

    return run_module(
        "pytest", ["pytest", "--cov=bayeux", "--cov-report=term-missing", *pytest_args]
    )


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
