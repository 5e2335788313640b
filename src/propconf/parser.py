"""PropConf command line parser module."""

import argparse
import logging
import sys
from typing import List, Optional

from .builder import DEFAULT_ARGUMENTS_PRIORITY, BuildOptions, Source, build, environment_sources
from .config import Properties
from .exceptions import PropConfError
from .readers import YAML_SUFFIXES, ArgumentsReader, reader_for_path
from .utils import dump_yaml

logger = logging.getLogger(__name__)

FILE_SUFFIXES = YAML_SUFFIXES + (".properties",)


class PropConfParser:
    """Builds properties from command line style arguments."""

    def __init__(self, options: Optional[BuildOptions] = None, include_environment: bool = False):
        """Initialize PropConf parser.

        Args:
            options: Base build options  # (command line flags override individual fields)
            include_environment: Register environment variables as a source
        """
        self.options = options or BuildOptions()
        self.include_environment = include_environment

    def parse_args(self, args: Optional[List[str]] = None) -> Properties:
        """Parse arguments and return the resolved properties.

        Args:
            args: Command line arguments (defaults to sys.argv[1:])

        Returns:
            Resolved properties
        """
        if args is None:
            args = sys.argv[1:]

        parsed_args = self._parse_command_line(args)
        return self._build_config(parsed_args)

    def _parse_command_line(self, args: List[str]) -> argparse.Namespace:
        """Parse command line arguments.

        Args:
            args: Command line arguments

        Returns:
            Parsed arguments namespace
        """
        parser = argparse.ArgumentParser(prog="propconf", description="PropConf Configuration Resolver")
        parser.add_argument(
            "sources",
            nargs="*",
            help="Properties or YAML files (later files win) and overrides in format <key>=<value>.",
        )
        parser.add_argument("--env", action="store_true", help="Include environment variables")
        parser.add_argument("--optional", action="store_true", help="Skip missing files instead of failing")
        parser.add_argument(
            "--ignore-unresolvable", action="store_true", help="Keep unresolvable placeholders as literal text"
        )
        parser.add_argument("--case-insensitive", action="store_true", help="Compare keys ignoring case")
        parser.add_argument("--delimiters", nargs=2, metavar=("START", "END"), help="Placeholder delimiters")
        parser.add_argument("--separator", help="Separator between a placeholder key and its default value")
        parser.add_argument(
            "--format", choices=["yaml", "properties"], default="yaml", help="Output format of the configuration"
        )
        parser.add_argument("--verbose", action="store_true", help="Log source reading and merging")
        return parser.parse_args(args)

    def _build_options(self, args: argparse.Namespace) -> BuildOptions:
        """Apply command line flags on top of the base options."""
        changes = {}
        if args.ignore_unresolvable:
            changes["ignore_unresolvable_placeholders"] = True
        if args.case_insensitive:
            changes["case_sensitive"] = False
        if args.delimiters:
            changes["start_delimiter"], changes["end_delimiter"] = args.delimiters
        if args.separator:
            changes["default_value_separator"] = args.separator
        return self.options.replace(**changes)

    def _build_config(self, args: argparse.Namespace) -> Properties:
        """Build properties from parsed arguments.

        Args:
            args: Parsed command line arguments  # (namespace with sources and flags)

        Returns:
            Resolved properties
        """
        sources: List[Source] = []

        # Step 1: Environment first, so every explicit source can override it
        if self.include_environment or getattr(args, "env", False):
            sources.extend(environment_sources())

        # Step 2: Files in order at the default priority, overrides above them
        overrides = []
        for source in args.sources:
            if "=" in source and not source.lower().endswith(FILE_SUFFIXES):
                overrides.append(source)
            else:
                sources.append(Source(reader_for_path(source, ignore_not_found=args.optional)))
        if overrides:
            sources.append(Source(ArgumentsReader(overrides), DEFAULT_ARGUMENTS_PRIORITY))

        return build(sources, self._build_options(args))

    def print_config(self, config: Properties, format: str = "yaml") -> None:
        """Print configuration.

        Args:
            config: Configuration to print
            format: `yaml` or `properties`
        """
        if format == "properties":
            for key, value in config.items():
                print(f"{key}={value}")
        else:
            print(dump_yaml(config.to_dict()), end="")


def main(args: Optional[List[str]] = None) -> int:
    """Console entry point: resolve the given sources and print the result."""
    if args is None:
        args = sys.argv[1:]

    parser = PropConfParser()
    parsed_args = parser._parse_command_line(args)
    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = parser._build_config(parsed_args)
    except (PropConfError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_config(config, parsed_args.format)
    return 0


if __name__ == "__main__":
    sys.exit(main())
