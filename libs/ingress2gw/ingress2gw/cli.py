"""
CLI for ingress2gw - Ingress to Gateway API converter.

Commands:
    print       Print Gateways and HTTPRoutes generated from Ingress resources
"""

import argparse
import functools
import logging
import sys
from typing import List, Optional

from .errors import Ingress2GatewayError
from .namespace import get_namespace_in_current_context
from .runner import PrintRunner
from .sources import create_provider
from .types import OutputFormat


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ingress2gw",
        description="Convert Ingress resources to Gateway API resources",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging on stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    print_parser = subparsers.add_parser(
        "print",
        help="Prints HTTPRoutes and Gateways generated from Ingress resources",
    )
    formats = ", ".join(f.value for f in OutputFormat)
    print_parser.add_argument(
        "-o", "--output",
        default=OutputFormat.YAML.value,
        help=f"Output format. One of: ({formats}) (default: yaml)",
    )
    print_parser.add_argument(
        "--input_file", "--input-file",
        dest="input_file",
        default="",
        help=(
            "Path to the manifest file. When set, ingresses are read from the "
            "file instead of the cluster. Supported files are yaml and json"
        ),
    )

    scope = print_parser.add_mutually_exclusive_group()
    scope.add_argument(
        "-n", "--namespace",
        default="",
        help="If present, the namespace scope for this CLI request",
    )
    scope.add_argument(
        "-A", "--all-namespaces",
        action="store_true",
        help="If present, process ingresses across all namespaces",
    )

    print_parser.add_argument(
        "--kubectl",
        default="kubectl",
        help="kubectl binary used to read from the cluster (default: kubectl)",
    )
    print_parser.add_argument(
        "--context",
        default=None,
        help="kubeconfig context used to read from the cluster",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_print(args: argparse.Namespace) -> int:
    """Handle print command."""
    runner = PrintRunner(
        output_format=args.output,
        input_file=args.input_file,
        namespace=args.namespace,
        all_namespaces=args.all_namespaces,
        provider_factory=lambda input_file: create_provider(
            input_file, kubectl=args.kubectl, context=args.context,
        ),
        current_namespace=functools.partial(
            get_namespace_in_current_context, context=args.context,
        ),
    )
    try:
        runner.print_gateways_and_httproutes(sys.stdout)
    except Ingress2GatewayError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    commands = {
        "print": cmd_print,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
