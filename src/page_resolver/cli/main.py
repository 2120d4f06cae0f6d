"""
CLI Interface Module

Command-line entry point for the Page Resolver. Resolves page ids from a
hierarchical pages table into site URLs, or prints the selected ids.

Output goes to stdout; logs and error messages go to stderr.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..models.data_structures import OutputMode, ResolveRequest
from ..orchestration.resolver_pipeline import ResolverPipeline
from ..utils.config_loader import Config, ResolverConfig
from ..utils.error_handlers import (
    ConfigurationError,
    ResolverError,
    log_error_with_context,
)


logger = logging.getLogger(__name__)

# Constants
DEFAULT_LOG_LEVEL = "WARNING"
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def setup_logging(
    log_level: str = DEFAULT_LOG_LEVEL, log_format: Optional[str] = None
) -> None:
    """Configure logging for the CLI application.

    Logs go to stderr so stdout carries only resolver output.

    Args:
        log_level: Logging level as string (DEBUG, INFO, WARNING, ERROR).
        log_format: Optional logging format string.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format=log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def handle_error(context: str, error: Exception) -> int:
    """Centralized error handling for the resolver run.

    Args:
        context: Description of the operation that failed.
        error: Exception that was raised.

    Returns:
        Exit code 1.
    """
    if isinstance(error, ResolverError):
        log_error_with_context(error, logger, {"context": context})
    elif isinstance(error, ValueError):
        logger.error(f"{context}: Invalid value - {error}")
    else:
        logger.error(f"{context}: {error}", exc_info=True)
    return EXIT_FAILURE


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="page-resolver",
        description="Resolve page ids of a hierarchical pages table into URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # URL of the site root that owns page 42
  %(prog)s --dsn mysql+pymysql://user:pass@db/typo3 --pid 42 --roots

  # URLs of every page below page 7
  %(prog)s --dsn sqlite:///pages.db --pid 7 --children

  # CSV of URL plus title for every page of a given type
  %(prog)s --dsn ... --query "SELECT uid, title FROM pages WHERE doktype=1" --nfields 1

  # Comma-separated ids of the children of page 7
  %(prog)s --dsn ... --pid 7 --children --id-list
        """,
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "--dsn",
        help="Database connection string (SQLAlchemy URL). "
        "Defaults to database.dsn from the config or $PAGE_RESOLVER_DSN",
    )
    parser.add_argument(
        "--pid",
        type=int,
        default=0,
        help="Page ID (default: %(default)s, none)",
    )
    parser.add_argument(
        "--query",
        help="A select that yields a list of page IDs in its first column",
    )
    parser.add_argument(
        "--nfields",
        type=int,
        default=0,
        help="Number of fields selected by --query except the page ID "
        "(default: %(default)s)",
    )
    parser.add_argument(
        "--children",
        action="store_true",
        help="Select children pages",
    )
    parser.add_argument(
        "--roots",
        action="store_true",
        help="Select root pages",
    )
    parser.add_argument(
        "--id-list",
        "--csv",
        dest="id_list",
        action="store_true",
        help="Print a comma-separated list of page IDs instead of URLs",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from config, WARNING)",
    )

    return parser


def build_request(
    args: argparse.Namespace, config: ResolverConfig
) -> ResolveRequest:
    """Turn parsed arguments into a ResolveRequest.

    Args:
        args: Parsed command-line arguments.
        config: Loaded configuration, used for the DSN fallback.

    Returns:
        Validated ResolveRequest.

    Raises:
        ConfigurationError: If no DSN is available or the flags conflict.
    """
    dsn = (args.dsn or config.dsn or "").strip()
    if not dsn:
        raise ConfigurationError(
            "must have DSN as argument", config_key="database.dsn"
        )

    try:
        return ResolveRequest(
            dsn=dsn,
            explicit_id=args.pid,
            query=args.query,
            n_fields=args.nfields,
            expand_to_children=args.children,
            collapse_to_root=args.roots,
            output_mode=OutputMode.ID_LIST if args.id_list else OutputMode.URL,
        )
    except ValueError as e:
        raise ConfigurationError(
            str(e), config_key="nfields", original_error=e
        ) from e


def load_config(config_path: Optional[str]) -> ResolverConfig:
    """Load and validate configuration.

    Raises:
        ConfigurationError: If the file cannot be read or fails validation.
    """
    config = Config.load(config_path)
    errors = Config.validate(config)
    if errors:
        raise ConfigurationError(f"Configuration invalid: {'; '.join(errors)}")
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Execute the main CLI entry point.

    Args:
        argv: Argument list; defaults to sys.argv[1:].

    Returns:
        Exit code: 0 for success, non-zero for errors.

    Example:
        $ page-resolver --dsn sqlite:///pages.db --pid 3 --roots
        https://example.com/index.php?id=1
    """
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"page-resolver v{__version__}")
        return EXIT_SUCCESS

    # Logging must work before the config is known.
    setup_logging(args.log_level or DEFAULT_LOG_LEVEL)

    try:
        config = load_config(args.config)
        setup_logging(
            args.log_level or str(config.logging.get("level", DEFAULT_LOG_LEVEL)),
            config.logging.get("format"),
        )

        request = build_request(args, config)
        result = ResolverPipeline(config).run(request)

        for line in result.lines:
            print(line)
        return EXIT_SUCCESS

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        return handle_error("Resolution failed", e)


if __name__ == "__main__":
    sys.exit(main())
