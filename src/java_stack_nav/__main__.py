"""Command line entry point for java-stack-nav.

This module provides a small CLI for working with Java stack traces saved
in files, outside of an editor. It handles:
- Configuration loading
- Logging setup
- Assembling and printing the frames of a trace
- Deobfuscating a file with a mapping file
- Locating neighbouring stack traces in a file
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from java_stack_nav._version import __version__

log = structlog.get_logger()


def setup_logging(
    debug: bool = False,
    log_format: str = "console",
    file_path: Path | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging
    """
    from java_stack_nav.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.INFO
    fmt = LogFormat(log_format.lower()) if isinstance(log_format, str) else log_format

    configure_logging(
        level=level,
        log_format=fmt,
        file_path=file_path,
        file_enabled=file_enabled,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse, defaults to ``sys.argv[1:]``

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="java-stack-nav",
        description="java-stack-nav - Navigate and deobfuscate Java stack traces",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: built-in defaults and environment)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    frames_parser = subparsers.add_parser(
        "frames",
        help="Print the frames of a stack trace, innermost call first",
    )
    frames_parser.add_argument("file", type=Path, help="File containing the stack trace")
    frames_parser.add_argument(
        "--line",
        type=int,
        default=None,
        help="Line inside the stack trace (default: first stack trace in the file)",
    )
    frames_parser.add_argument(
        "--mapping",
        type=Path,
        default=None,
        help="Obfuscation mapping file to deobfuscate the frames with",
    )

    deobfuscate_parser = subparsers.add_parser(
        "deobfuscate",
        help="Deobfuscate a whole file with a mapping file",
    )
    deobfuscate_parser.add_argument("file", type=Path, help="File to deobfuscate")
    deobfuscate_parser.add_argument(
        "--mapping",
        type=Path,
        required=True,
        help="Obfuscation mapping file",
    )

    for name, help_text in (
        ("next", "Print the first line of the next stack trace"),
        ("prev", "Print the first line of the previous stack trace"),
    ):
        block_parser = subparsers.add_parser(name, help=help_text)
        block_parser.add_argument("file", type=Path, help="File containing stack traces")
        block_parser.add_argument(
            "--line",
            type=int,
            required=True,
            help="Line to search from",
        )

    return parser.parse_args(argv)


async def run_command(args: argparse.Namespace) -> int:
    """Run the selected subcommand.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from java_stack_nav.adapters.filter.command import CommandTextFilter
    from java_stack_nav.adapters.text.lines import ArrayTextSource
    from java_stack_nav.config.loader import load_config
    from java_stack_nav.core.assembler import FrameAssembler
    from java_stack_nav.core.deobfuscator import Deobfuscator
    from java_stack_nav.models.frame import frames_to_text
    from java_stack_nav.utils.async_helpers import NavigatorError
    from java_stack_nav.utils.logging import configure_logging

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(args.config), error=str(e))
        return 1
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    if args.config is not None:
        # Reconfigure logging from config file settings
        configure_logging(
            level="DEBUG" if args.debug else config.logging.level,
            log_format=config.logging.format,
            file_path=config.logging.file.path if config.logging.file.enabled else None,
            file_enabled=config.logging.file.enabled,
        )

    assembler = FrameAssembler()
    deobfuscator = Deobfuscator(
        CommandTextFilter(
            config.stack_trace.deobfuscate_command,
            timeout=config.stack_trace.filter_timeout,
        ),
        assembler=assembler,
    )

    try:
        source = ArrayTextSource.from_file(args.file)
    except OSError as e:
        log.error("input_file_unreadable", path=str(args.file), error=str(e))
        return 1

    try:
        if args.command == "frames":
            line = args.line
            if line is None:
                line = assembler.find_first_frame_line(source)
                if line is None:
                    log.error("no_stack_trace_found", path=str(args.file))
                    return 1

            frames = assembler.assemble(source, line).frames
            if args.mapping is not None:
                frames = await deobfuscator.deobfuscate(frames, str(args.mapping))

            sys.stdout.write(frames_to_text(frames))
            return 0

        if args.command == "deobfuscate":
            text = source.line_range(1, source.line_count)
            sys.stdout.write(await deobfuscator.deobfuscate_text(text, str(args.mapping)))
            return 0

        if args.command == "next":
            found = assembler.find_next_block(source, args.line)
        else:
            found = assembler.find_previous_block(source, args.line)

        if found is None:
            log.error("no_neighbouring_stack_trace", direction=args.command, line=args.line)
            return 1

        print(found)
        return 0

    except NavigatorError as e:
        log.error("command_failed", command=args.command, error=str(e))
        return 1
    except IndexError as e:
        log.error("line_out_of_range", line=getattr(args, "line", None), error=str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Setup logging with CLI options
    setup_logging(
        debug=args.debug,
        log_format=args.format,
    )

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
