"""DevOps tasks for rimraf.

Usage: uv run devops.py <task>
Tasks: fmt, test, clean
"""

import subprocess
import sys

# Build and cache artifacts removed by the clean task
CLEAN_PATTERNS = [
    "**/__pycache__",
    "**/*.pyc",
    ".pytest_cache",
    ".ruff_cache",
    ".mypy_cache",
    "build",
    "dist",
    "*.egg-info",
]


def _run(commands: list[list[str]]) -> None:
    """Execute a sequence of shell commands, exiting on first failure."""
    for cmd in commands:
        try:
            subprocess.run(cmd, check=True)  # nosec: B603, B607
        except subprocess.CalledProcessError as e:
            print(f"Command failed: {' '.join(e.cmd)}", file=sys.stderr)
            sys.exit(e.returncode)


def format_code() -> None:
    """Format the codebase with Ruff."""
    _run([["ruff", "format", "."], ["ruff", "check", "--fix", "."]])


def test() -> None:
    """Run tests with PyTest."""
    _run([["uv", "run", "pytest", "-q"]])


def clean() -> None:
    """Clean up the project with rimraf itself."""
    from rimraf import GlobOptions, RimrafError, RimrafOptions, rimraf_sync

    options = RimrafOptions(glob=GlobOptions(recursive=True, include_hidden=True))
    try:
        rimraf_sync(CLEAN_PATTERNS, options)
    except RimrafError as e:
        print(f"Clean failed: {e}", file=sys.stderr)
        sys.exit(1)
    print("Caches and build artifacts removed.")


TASKS = {"fmt": format_code, "test": test, "clean": clean}


if __name__ == "__main__":
    if len(sys.argv) != 2 or sys.argv[1] not in TASKS:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    TASKS[sys.argv[1]]()
