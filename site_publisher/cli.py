"""
Command-line interface for site-publisher.

This module is responsible for argument parsing, resolving the run
configuration from the environment and delegating to the pipeline.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import config as defaults
from .config import ENVIRONMENT_VARIABLES, resolve_config
from .errors import PublishError
from .logging_utils import configure_logging
from .pipeline import run_publish
from .runner import CommandRunner


def _environment_epilog() -> str:
    lines = ["environment variables (all optional):"]
    for name, default in ENVIRONMENT_VARIABLES:
        lines.append(f"  {name:<20} default: {default}")
    lines.append("")
    lines.append(
        "COMMIT_ENTIRE_REPO=true commits every change in the repository except "
        "the venv; any other value commits only the docs directory."
    )
    return "\n".join(lines)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-publisher",
        description=(
            "Rebuild the static site's generated data in a throwaway virtual "
            "environment, then commit and push the result."
        ),
        epilog=_environment_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--workdir",
        default=".",
        help="Directory holding the requirements file and generator (default: current directory).",
    )
    parser.add_argument(
        "--venv-dir",
        default=defaults.DEFAULT_VENV_DIR,
        help="Disposable virtual environment directory, relative to --workdir.",
    )
    parser.add_argument(
        "--requirements",
        default=defaults.DEFAULT_REQUIREMENTS_FILE,
        help="Dependency declarations installed into the virtual environment.",
    )
    parser.add_argument(
        "--generator",
        default=defaults.DEFAULT_GENERATOR_SCRIPT,
        help="Script that regenerates the output directory.",
    )
    parser.add_argument(
        "--output-dir",
        default=defaults.DEFAULT_OUTPUT_DIR,
        help="Generated output directory, deleted before regeneration.",
    )
    parser.add_argument(
        "--docs-dir",
        default=defaults.DEFAULT_DOCS_DIR,
        help="Directory committed when COMMIT_ENTIRE_REPO is not 'true'.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (shows every command that is run).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    verbosity = -1 if args.quiet else args.verbose
    configure_logging(verbosity=verbosity)

    runner = CommandRunner()
    try:
        config = resolve_config(
            os.environ,
            runner,
            working_dir=Path(args.workdir).resolve(),
            venv_dir=args.venv_dir,
            requirements_file=args.requirements,
            generator_script=args.generator,
            output_dir=args.output_dir,
            docs_dir=args.docs_dir,
            verbosity=verbosity,
        )
        run_publish(config, runner)
    except KeyboardInterrupt:
        return 130
    except PublishError as exc:
        print(f"site-publisher: error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
