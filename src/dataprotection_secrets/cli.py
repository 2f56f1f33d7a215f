"""CLI tool for inspecting and seeding a data-protection keyring.

Usage:
    dataprotection-keys list [--prefix PREFIX] [--region REGION]
    dataprotection-keys store FILE [--name NAME] [--prefix PREFIX] [--region REGION]

Environment Variables:
    DATAPROTECTION_SECRETS_PREFIX: Default secret name prefix
    DATAPROTECTION_SECRETS_CONFIG: Optional YAML file with persist options
    AWS_REGION / AWS_DEFAULT_REGION: AWS region
"""

import argparse
import logging
import sys
from xml.etree import ElementTree

from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConfigurationError
from .factory import ENV_PREFIX, get_repository


def _build_repository(args):
    return get_repository(prefix=args.prefix, region=args.region)


def cmd_list(args):
    """List keys stored under the prefix."""
    with _build_repository(args) as repository:
        elements = repository.get_all_elements()

        if not elements:
            print(f"No keys found under prefix {repository.prefix}")
            return

        print(f"Keys under prefix {repository.prefix}:\n")
        for element in elements:
            print(f"  {element.get('id') or '(no id)'}")
        print(f"\n{len(elements)} key(s)")


def cmd_store(args):
    """Store a key element read from an XML file."""
    try:
        element = ElementTree.parse(args.file).getroot()
    except (ElementTree.ParseError, OSError) as e:
        print(f"❌ Error: could not read key from {args.file}: {e}", file=sys.stderr)
        sys.exit(1)

    with _build_repository(args) as repository:
        secret_name = repository.store_element(element, args.name)

    print(f"✅ Key stored as {secret_name}")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Manage data-protection keys stored in AWS Secrets Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--prefix", help=f"Secret name prefix (default: ${ENV_PREFIX})")
    common.add_argument("--region", help="AWS region (default: $AWS_REGION)")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("list", parents=[common], help="List keys stored under the prefix")

    store_parser = subparsers.add_parser(
        "store", parents=[common], help="Store a key from an XML file"
    )
    store_parser.add_argument("file", help="Path to the XML key file")
    store_parser.add_argument("--name", help="Friendly name (default: the key's id attribute)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "list":
            cmd_list(args)
        elif args.command == "store":
            cmd_store(args)
    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ClientError, BotoCoreError) as e:
        print(f"❌ AWS error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
