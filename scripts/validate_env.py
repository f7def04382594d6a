#!/usr/bin/env python3
"""Check that the environment is ready for a deploy."""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

REQUIRED_VARS = ["OPENAI_API_KEY", "SECRET_KEY"]
OPTIONAL_VARS = ["PORT", "LOG_LEVEL", "OPENAI_MODEL", "MAX_UPLOAD_BYTES"]
MIN_SECRET_LENGTH = 32


def read_repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def check_required(env) -> tuple[list[str], list[str]]:
    """Return (errors, warnings) for the required variables."""
    errors, warnings = [], []
    for name in REQUIRED_VARS:
        value = env.get(name)
        if not value:
            errors.append(f"{name} is not set")
        elif name == "OPENAI_API_KEY" and not value.startswith("sk-"):
            errors.append(f"{name} should start with 'sk-'")
        elif name == "SECRET_KEY" and len(value) < MIN_SECRET_LENGTH:
            warnings.append(f"{name} should be at least {MIN_SECRET_LENGTH} characters")
    return errors, warnings


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate environment variables before deployment")
    parser.add_argument("--env-file", default=str(read_repo_root() / ".env"), help="dotenv file to load first")
    args = parser.parse_args(argv)

    load_dotenv(args.env_file)
    errors, warnings = check_required(os.environ)

    for name in REQUIRED_VARS:
        if not any(msg.startswith(name) for msg in errors + warnings):
            print(f"OK: {name} is set")
    for msg in warnings:
        print(f"WARNING: {msg}")
    for msg in errors:
        print(f"ERROR: {msg}", file=sys.stderr)
    for name in OPTIONAL_VARS:
        print(f"{'OK' if os.environ.get(name) else 'INFO'}: {name} is {'set' if os.environ.get(name) else 'not set (using default)'}")

    if errors:
        print("Environment validation FAILED.", file=sys.stderr)
        return 1
    print("Environment validation passed" + (" with warnings." if warnings else "."))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
