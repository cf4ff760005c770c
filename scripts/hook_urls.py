#!/usr/bin/env python3
"""
Hook URL Printer

Prints the hook path for every configured endpoint, to paste into each
provider's webhook settings. Can also create a new random key file.

Usage:
    python scripts/hook_urls.py [--base-url https://hooks.example.com]
    python scripts/hook_urls.py --generate github_key

The printed paths are credentials for unsigned providers (DockerHub,
Bitbucket Cloud): treat them like the keys they are derived from.
"""

import argparse
import secrets
import sys
from pathlib import Path

# Add parent directory to path so we can import from hookgate
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from hookgate.config import settings  # noqa: E402
from hookgate.errors import ConfigurationError  # noqa: E402
from hookgate.keystore import FileSecretLoader  # noqa: E402
from hookgate.registry import EndpointRegistry  # noqa: E402


def generate_key(key_id: str) -> None:
    path = Path(settings.keys_dir) / key_id
    if path.exists():
        print(f"ERROR: {path} already exists, refusing to overwrite")
        sys.exit(1)

    # 20 random bytes, hex encoded, as GitHub's docs suggest for hook secrets
    key = secrets.token_hex(20)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(key)
    path.chmod(0o600)

    print(f"Wrote {path}")
    print()
    print("Use this value as the hook secret / token in the provider:")
    print(f"  {key}")


def print_urls(base_url: str) -> None:
    loader = FileSecretLoader(settings.keys_dir)
    registry = EndpointRegistry(loader)

    if not settings.endpoints:
        print("No endpoints configured (set ENDPOINTS in .env)")
        return

    for endpoint in settings.endpoints:
        try:
            registry.register(endpoint)
        except ConfigurationError as e:
            print(f"ERROR: {endpoint.source.value} {endpoint.key_id}: {e}")
            sys.exit(1)

    for fp, registered in registry.routes.items():
        endpoint = registered.endpoint
        print(f"{endpoint.source.value:<16} {endpoint.key_id:<24} {base_url.rstrip('/')}/hook/{fp}")


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--base-url", default="", help="public URL of the gateway")
    parser.add_argument("--generate", metavar="KEY_ID", help="create a new key file in KEYS_DIR")
    args = parser.parse_args()

    if args.generate:
        generate_key(args.generate)
    else:
        print_urls(args.base_url)


if __name__ == "__main__":
    main()
