"""
CLI entry point for the checkout flow documentation generator
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config_helper import ConfigHelper
from .diagram_generators import AVAILABLE_GENERATORS
from .generator import CheckoutDocsGenerator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='checkout-flow-docs',
        description="Checkout Flow Docs - Map Magento events to observers, services and Mollie API calls",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Using config file (recommended)
  checkout-flow-docs --config checkout_flow_config.yaml

  # Manual mode
  checkout-flow-docs --module-dir vendor/mollie/module-payment --output-dir docs

  # Graphviz diagram, only etc/**/events.xml, plus a flat endpoint list
  checkout-flow-docs --module-dir ./module --diagram dot --require-etc-dir --endpoint-index
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration file (checkout_flow_config.yaml)'
    )
    parser.add_argument(
        '--module-dir',
        type=str,
        help='Path to the payment module source tree (required if --config not provided)'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        default='docs',
        help='Directory for the generated Markdown (default: docs)'
    )
    parser.add_argument(
        '--repo-url',
        type=str,
        help='Base URL for observer source links'
    )
    parser.add_argument(
        '--diagram',
        choices=AVAILABLE_GENERATORS,
        default='mermaid',
        help='Flow diagram format (default: mermaid)'
    )
    parser.add_argument(
        '--require-etc-dir',
        action='store_true',
        help='Only read events.xml files located below an etc/ directory'
    )
    parser.add_argument(
        '--endpoint-index',
        action='store_true',
        help='Also write a flat list of detected endpoints to index.md'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Report every skipped file'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode (show full tracebacks)'
    )
    return parser


def main(argv=None) -> None:
    """CLI entry point for the generator"""
    args = build_parser().parse_args(argv)

    try:
        if args.config:
            config_file = Path(args.config)
            start_path = config_file.parent if config_file.parent != Path('.') else Path.cwd()
            config_helper = ConfigHelper(start_path=start_path, config_file_name=config_file.name)
            generator = CheckoutDocsGenerator.from_config(config_helper, verbose=args.verbose)
        else:
            if not args.module_dir:
                print("Error: --module-dir is required when --config is not provided", file=sys.stderr)
                sys.exit(1)

            generator = CheckoutDocsGenerator(
                module_dir=Path(args.module_dir),
                output_dir=Path(args.output_dir),
                repo_url=args.repo_url,
                diagram_type=args.diagram,
                require_etc_dir=args.require_etc_dir,
                endpoint_index=args.endpoint_index,
                verbose=args.verbose
            )

        generator.run()

    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n[SCAN] Interrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
