"""Command-line interface for infopack."""

import argparse
import logging
import signal
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path

from .bag import BagPackageReader
from .builder import PackageBuilder
from .cancellation import CancellationToken
from .config import Settings
from .context import LoggingProgressListener
from .exceptions import InfopackError, OperationCancelled
from .parser import METSPackageReader, load_package_model
from .profiles import PROFILES
from .reporting import format_for, write_report

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CANCELLED = 130


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


@contextmanager
def cancellation_on_signals():
    """Yield a cancellation token that SIGINT and SIGTERM cancel.

    Previous handlers are restored on exit.
    """
    token = CancellationToken()
    logger = logging.getLogger(__name__)

    def _handle_shutdown(signum, frame) -> None:
        logger.info("Shutdown signal received, cancelling")
        token.cancel()

    previous = {
        signum: signal.signal(signum, _handle_shutdown)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        yield token
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


@contextmanager
def work_destination(destination: Path | None):
    """Yield the destination, or a temporary directory removed on exit."""
    if destination is not None:
        yield destination
        return
    with tempfile.TemporaryDirectory(prefix="infopack-") as temporary:
        logger = logging.getLogger(__name__)
        logger.debug(f"Working in temporary directory {temporary}")
        yield Path(temporary)


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from --config, with command-line overrides applied."""
    settings = Settings.from_file(args.config) if getattr(args, "config", None) else Settings()
    return settings.with_overrides(profile=getattr(args, "profile", None))


def _report_path_ok(path: Path | None, logger: logging.Logger) -> bool:
    """Check that a --report path has a supported suffix."""
    if path is None:
        return True
    try:
        format_for(path)
    except ValueError as e:
        logger.error(str(e))
        return False
    return True


def _log_report(package, logger: logging.Logger) -> None:
    report = package.report
    errors = report.errors()
    warnings = report.warnings()
    logger.info(f"  Valid: {'yes' if report.is_valid() else 'no'}")
    if warnings:
        logger.warning(f"  Warnings: {len(warnings)}")
        for entry in warnings:
            logger.warning(f"    - {entry}")
    if errors:
        logger.error(f"  Errors: {len(errors)}")
        for entry in errors:
            logger.error(f"    - {entry}")


def parse_command(args: argparse.Namespace) -> int:
    """Execute the parse command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for a valid package, non-zero otherwise)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    source = args.source.resolve()
    if not source.exists():
        logger.error(f"Package not found: {source}")
        return EXIT_INVALID
    if not _report_path_ok(args.report, logger):
        return EXIT_INVALID
    if args.model_output and args.destination is None:
        logger.error("--model-output requires --destination: the model refers to extracted files")
        return EXIT_INVALID

    try:
        settings = load_settings(args)
        with cancellation_on_signals() as token, work_destination(args.destination) as destination:
            reader = METSPackageReader(
                settings, cancellation=token, listener=LoggingProgressListener()
            )
            package = reader.parse(source, destination)
    except OperationCancelled:
        logger.warning("Parsing cancelled")
        return EXIT_CANCELLED
    except (InfopackError, OSError, ValueError) as e:
        logger.error(f"Failed to parse package: {e}")
        return EXIT_INVALID

    logger.info(f"Parsed package: {package.id}")
    logger.info(f"  Role: {package.role.value}")
    logger.info(f"  Representations: {len(package.representations)}")
    _log_report(package, logger)

    if args.report:
        write_report(package.report, args.report, package.id)
    if args.model_output:
        args.model_output.write_text(
            package.model_dump_json(indent=2, exclude_none=True, exclude={"report"})
        )
        logger.info(f"  Model: {args.model_output}")

    return EXIT_OK if package.report.is_valid() else EXIT_INVALID


def build_command(args: argparse.Namespace) -> int:
    """Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when the package was written, non-zero otherwise)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    model_path = args.model.resolve()
    if not model_path.exists():
        logger.error(f"Package model not found: {model_path}")
        return EXIT_INVALID
    if not _report_path_ok(args.report, logger):
        return EXIT_INVALID

    try:
        package = load_package_model(model_path)
        settings = load_settings(args)
        with cancellation_on_signals() as token:
            builder = PackageBuilder(settings, token)
            result = builder.build(package, args.output, args.name, as_zip=not args.directory)
    except OperationCancelled:
        logger.warning("Build cancelled")
        return EXIT_CANCELLED
    except (InfopackError, OSError, ValueError) as e:
        logger.error(f"Failed to build package: {e}")
        return EXIT_INVALID

    if args.report:
        write_report(result.report, args.report, package.id)
    if not result.succeeded:
        for entry in result.report.errors():
            logger.error(f"  - {entry}")
        return EXIT_INVALID

    logger.info(f"Built package: {package.id}")
    logger.info(f"  Entries: {len(result.entries)}")
    logger.info(f"  Output: {result.path}")
    return EXIT_OK


def import_bag_command(args: argparse.Namespace) -> int:
    """Execute the import-bag command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for a valid bag, non-zero otherwise)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    source = args.source.resolve()
    if not source.exists():
        logger.error(f"Bag not found: {source}")
        return EXIT_INVALID
    if not _report_path_ok(args.report, logger):
        return EXIT_INVALID

    try:
        settings = load_settings(args)
        with cancellation_on_signals() as token, work_destination(args.destination) as destination:
            package = BagPackageReader(token).parse(source, destination)
            result = None
            if args.output and package.report.is_valid():
                result = PackageBuilder(settings, token).build(package, args.output)
    except OperationCancelled:
        logger.warning("Bag import cancelled")
        return EXIT_CANCELLED
    except (InfopackError, OSError, ValueError) as e:
        logger.error(f"Failed to import bag: {e}")
        return EXIT_INVALID

    logger.info(f"Imported bag: {package.id}")
    logger.info(f"  Representations: {len(package.representations)}")
    _log_report(package, logger)
    if args.report:
        write_report(package.report, args.report, package.id)

    if result is not None:
        if not result.succeeded:
            for entry in result.report.errors():
                logger.error(f"  - {entry}")
            return EXIT_INVALID
        logger.info(f"  Output: {result.path}")

    return EXIT_OK if package.report.is_valid() else EXIT_INVALID


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="infopack",
        description="Read, validate and build METS-described information packages",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    parse_parser = subparsers.add_parser(
        "parse",
        help="Read and validate a package",
        description="Read a package (zip or directory), validate it and report what was found.",
    )
    parse_parser.add_argument(
        "--source",
        type=Path,
        required=True,
        help="Package zip file or directory",
    )
    parse_parser.add_argument(
        "--destination",
        type=Path,
        default=None,
        help="Directory for extracted content (default: a temporary directory removed on exit)",
    )
    parse_parser.add_argument(
        "--profile",
        choices=sorted(PROFILES),
        default=None,
        help="Package profile (default: eark, or the value in --config)",
    )
    parse_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON settings file",
    )
    parse_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write the validation report (.txt, .json or .html)",
    )
    parse_parser.add_argument(
        "--model-output",
        type=Path,
        default=None,
        help="Write the parsed package model as JSON (requires --destination)",
    )
    parse_parser.set_defaults(func=parse_command)

    build_parser = subparsers.add_parser(
        "build",
        help="Build a package from a package model",
        description="Build a common-profile package from a JSON package model.",
    )
    build_parser.add_argument(
        "--model",
        type=Path,
        required=True,
        help="JSON package model (e.g. written by parse --model-output)",
    )
    build_parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Output directory",
    )
    build_parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Output name without extension (default: the package id)",
    )
    build_parser.add_argument(
        "--directory",
        action="store_true",
        help="Write a directory tree instead of a zip file",
    )
    build_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON settings file",
    )
    build_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write the build report (.txt, .json or .html)",
    )
    build_parser.set_defaults(func=build_command)

    bag_parser = subparsers.add_parser(
        "import-bag",
        help="Read a BagIt bag as a package",
        description="Validate a BagIt bag and read it as a package; optionally build it.",
    )
    bag_parser.add_argument(
        "--source",
        type=Path,
        required=True,
        help="Bag zip file or directory",
    )
    bag_parser.add_argument(
        "--destination",
        type=Path,
        default=None,
        help="Directory for extracted content (default: a temporary directory removed on exit)",
    )
    bag_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Build the imported package into this directory",
    )
    bag_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON settings file",
    )
    bag_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write the validation report (.txt, .json or .html)",
    )
    bag_parser.set_defaults(func=import_bag_command)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
