"""Command-line interface for yamlmerge."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from yamlmerge import __version__
from yamlmerge.config import load_config, validate_config
from yamlmerge.errors import ConfigError, MergeError
from yamlmerge.files import merge_files

USAGE = "%(prog)s [options] <source_yaml_file> <destination_yaml_file>"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="yamlmerge",
        usage=USAGE,
        description="Merge the keys of a source YAML file into a destination file, "
                    "keeping the destination's quoting, comments and key order.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Version: {__version__}

Examples:
  %(prog)s generated.yaml values.yaml            Update values.yaml in place
  %(prog)s --dry-run generated.yaml values.yaml  Print the result instead
  %(prog)s --atomic generated.yaml values.yaml   Write via temp file + rename
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: ./.yamlmerge.yaml)",
    )

    parser.add_argument(
        "--atomic",
        action="store_true",
        help="Write to a temporary file and rename it over the destination",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="Print the merged YAML instead of writing the destination",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    parser.add_argument("paths", nargs="*", type=Path, help=argparse.SUPPRESS)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if len(args.paths) != 2:
        print("Usage: " + USAGE % {"prog": parser.prog})
        return 1

    source_path, dest_path = args.paths

    try:
        config = load_config(args.config)
        errors = validate_config(config)
        if errors:
            for error in errors:
                print(f"❌ Config error: {error}", file=sys.stderr)
            return 1

        settings = dict(config)
        if args.atomic:
            settings["atomic_write"] = True

        output = merge_files(source_path, dest_path, settings, dry_run=args.dry_run)

    except (ConfigError, MergeError) as e:
        print(f"❌ Error processing files: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nOperation interrupted by user.", file=sys.stderr)
        return 1

    if args.dry_run:
        sys.stdout.write(output)
    else:
        print("✓ YAML files merged successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
