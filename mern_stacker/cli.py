"""mern-stacker command-line entry point.

Non-interactive front end over the composition engine: every choice is a
flag, the feature list is resolved from the choices, the project is
generated, and the next steps are printed.

Usage::

    mern-stacker my-app
    mern-stacker my-app --structure monorepo --feature tailwind --feature zod
    mern-stacker my-app --database db-postgres --orm drizzle --auth jwt --docker
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from mern_stacker.config import Config
from mern_stacker.scaffolder import ProjectGenerator, ScaffoldError, ScaffoldResult
from mern_stacker.selection import ProjectChoices
from mern_stacker.utils import (
    console,
    format_duration,
    print_error,
    print_next_steps,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mern-stacker",
        description="Scaffold a React + Vite + Express project from templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  mern-stacker my-app\n"
            "  mern-stacker my-app --language js --router router-react\n"
            "  mern-stacker my-app --structure monorepo --feature tailwind --feature zod\n"
            "  mern-stacker my-app --database db-postgres --orm drizzle --auth jwt --docker\n"
        ),
    )
    parser.add_argument("project_name", help="Name of the project directory to create")
    parser.add_argument("--language", "-l", choices=["ts", "js"], default="ts")
    parser.add_argument(
        "--structure", "-s", choices=["standard", "monorepo"], default="standard"
    )
    parser.add_argument(
        "--router",
        choices=["none", "router-react", "router-tanstack"],
        default="none",
    )
    parser.add_argument(
        "--feature",
        "-f",
        dest="features",
        action="append",
        default=[],
        choices=["tailwind", "query-tanstack", "zustand", "zod"],
        help="Frontend feature (repeatable)",
    )
    parser.add_argument("--shadcn", action="store_true", help="Add shadcn/ui (needs tailwind)")
    parser.add_argument(
        "--database",
        choices=["none", "db-mongo", "db-postgres", "db-mysql"],
        default="none",
    )
    parser.add_argument("--orm", choices=["none", "drizzle", "prisma"], default="none")
    parser.add_argument("--auth", choices=["none", "jwt", "better-auth"], default="none")
    parser.add_argument("--docker", action="store_true", help="Add Docker Compose for the database")
    parser.add_argument(
        "--package-manager", "-p", choices=["pnpm", "npm", "bun"], default="pnpm"
    )
    parser.add_argument(
        "--install",
        action="store_true",
        help="Record that dependencies will be installed (omits install steps from the output)",
    )
    parser.add_argument(
        "--cwd",
        default=None,
        help="Directory to create the project in (default: $INIT_CWD or the current directory)",
    )
    parser.add_argument(
        "--templates-dir",
        default=None,
        help="Template store to use instead of the bundled one",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Config:
    """Environment-derived settings with command-line overrides applied."""
    settings = Config.from_env()
    if args.cwd:
        settings.cwd = Path(args.cwd)
    if args.templates_dir:
        settings.templates_dir = Path(args.templates_dir)
    return settings


def report(result: ScaffoldResult, elapsed: float) -> None:
    print_success(f"Project created successfully in {format_duration(elapsed)}")
    print_summary_table(
        {
            "Project": result.project_name,
            "Path": str(result.project_path),
            "Language": result.language,
            "Structure": result.structure.value,
            "Package manager": result.package_manager,
            "Features": ", ".join(result.applied_features) or "(none)",
            "Files written": str(result.files_written),
        },
        title="Scaffold Results",
    )
    if result.skipped_features:
        print_warning(
            "No templates found for: " + ", ".join(result.skipped_features)
        )
    print_next_steps(result.next_steps())


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``mern-stacker`` and ``python -m mern_stacker.cli``."""
    args = build_parser().parse_args(argv)

    try:
        choices = ProjectChoices(
            name=args.project_name,
            language=args.language,
            structure=args.structure,
            router=args.router,
            frontend_features=args.features,
            shadcn=args.shadcn,
            database=args.database,
            orm=args.orm,
            auth=args.auth,
            docker=args.docker,
            package_manager=args.package_manager,
            install=args.install,
        )
    except ValidationError as exc:
        for error in exc.errors():
            print_error(f"Error: {error['msg'].removeprefix('Value error, ')}")
        return 1

    settings = settings_from_args(args)
    generator = ProjectGenerator(choices.to_project_config(), settings)

    start = time.monotonic()
    try:
        with console.status("Creating project..."):
            result = asyncio.run(generator.generate())
    except ScaffoldError as exc:
        print_error(f"Failed to create project: {exc}")
        return 1

    report(result, time.monotonic() - start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
