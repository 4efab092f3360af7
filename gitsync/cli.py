"""Command line entry point for gitsync."""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import Config, load_configuration, validate_configuration, split_names, format_names, VALID_LOG_LEVELS
from .errors import ConfigurationError, GitSyncError, ToolNotFound, error_handler
from .platform import get_platform_specific_defaults


def setup_logging(config: Config) -> None:
    """Setup logging on stderr; stdout is reserved for findings."""
    class StructuredFormatter(logging.Formatter):
        def format(self, record):
            # Add structured data if available
            if hasattr(record, 'operation'):
                record.msg = f"[{record.operation}] {record.msg}"
            return super().format(record)

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr
    )

    formatter = StructuredFormatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    logger = logging.getLogger('gitsync')
    logger.setLevel(getattr(logging, config.log_level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError("Must be >= 0")
    return number


def build_parser() -> argparse.ArgumentParser:
    defaults = get_platform_specific_defaults()
    parser = argparse.ArgumentParser(
        prog="gitsync",
        description="Scan a directory tree for git repositories that are dirty or out of sync with their remotes."
    )
    parser.add_argument(
        "-d", "--base-dir", required=True,
        help="Base directory to scan for git repositories (required)"
    )
    parser.add_argument(
        "-m", "--max-depth", type=non_negative_int, default=None,
        help=f"Maximum depth of recursive directory scan (default: {defaults['max_depth']})"
    )
    parser.add_argument(
        "-a", "--ahead-only", action="store_true",
        help="Ignore local branches that are behind corresponding remote branches"
    )
    parser.add_argument(
        "-b", "--behind-only", action="store_true",
        help="Ignore local branches that are ahead of corresponding remote branches"
    )
    parser.add_argument(
        "-r", "--ref-branches", type=split_names, default=None, metavar="<name1>,<name2>...",
        help="Remote branches to compare against for local-only branches "
             f"(default: {format_names(defaults['reference_branches'])})"
    )
    parser.add_argument(
        "-i", "--list-ignored", action="store_true",
        help="List files and non-empty directories excluded by ignore rules"
    )
    parser.add_argument(
        "-e", "--ignore-excludes", type=split_names, default=None, metavar="<name1>,<name2>...",
        help="Names to leave out of the ignored files listing (implies --list-ignored)"
    )
    parser.add_argument(
        "--log-level", type=str.upper, choices=VALID_LOG_LEVELS, default=None,
        help=f"Diagnostic logging level on stderr (default: {defaults['log_level']})"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    return load_configuration(
        args.base_dir,
        max_depth=args.max_depth,
        ahead_only=args.ahead_only,
        behind_only=args.behind_only,
        reference_branches=args.ref_branches,
        list_ignored=args.list_ignored,
        ignore_excludes=args.ignore_excludes,
        log_level=args.log_level
    )


def run(config: Config) -> int:
    """Verify git, then walk the base directory. Returns the exit code."""
    logger = logging.getLogger('gitsync.cli')

    try:
        from .scan import (
            DivergenceChecker, GitExecutor, IgnoredFilesScanner, Reporter, RepoWalker, verify_git_version
        )
    except ImportError as e:
        # GitPython refuses to import when no git executable can be found
        logger.debug(f"Cannot import git support: {e}")
        return error_handler.handle_fatal(ToolNotFound(f"git not found: {e}"))

    executor = GitExecutor(config.git_executable)
    reporter = Reporter(config.base_dir)

    try:
        verify_git_version(executor)
    except GitSyncError as e:
        return error_handler.handle_fatal(e, {'base_dir': str(config.base_dir)})

    checker = DivergenceChecker(config, executor, reporter)
    ignored_scanner = IgnoredFilesScanner(config, executor, reporter) if config.list_ignored else None
    walker = RepoWalker(config, checker, ignored_scanner)

    inspected = walker.walk()
    logger.info(f"Scan finished: {inspected} repositories, {reporter.findings} findings")
    walker.performance_logger.log_performance_summary()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Findings are not failures: a completed scan exits with 0."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on bad usage
        return 0 if e.code == 0 else 1

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        return error_handler.handle_fatal(e)

    setup_logging(config)

    issues = validate_configuration(config)
    for issue in issues:
        if issue.startswith("WARNING:"):
            logging.getLogger('gitsync.cli').warning(issue[9:])
    errors = [issue[7:] for issue in issues if issue.startswith("ERROR:")]
    if errors:
        return error_handler.handle_fatal(ConfigurationError(errors[0]), {'base_dir': str(config.base_dir)})

    try:
        return run(config)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
