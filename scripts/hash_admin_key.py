#!/usr/bin/env python3
"""Emit the JOBLY_ADMIN_API_KEY_HASH setting for an admin API key."""

from __future__ import annotations

import argparse
import hashlib
import secrets


def render_env(*, api_key: str) -> str:
    digest = hashlib.sha256(api_key.encode("utf-8")).hexdigest()
    return f"JOBLY_ADMIN_API_KEY_HASH={digest}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Hash an admin API key for the jobly API settings.")
    key_group = parser.add_mutually_exclusive_group(required=True)
    key_group.add_argument("--key", help="Existing admin API key to hash")
    key_group.add_argument(
        "--generate",
        action="store_true",
        help="Generate a new random key and print it alongside its hash",
    )
    args = parser.parse_args()

    api_key = args.key
    if args.generate:
        api_key = secrets.token_urlsafe(32)
        print(f"# admin API key (store securely): {api_key}")

    print(render_env(api_key=api_key))


if __name__ == "__main__":
    main()
