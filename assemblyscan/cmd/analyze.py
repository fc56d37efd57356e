# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import sys

import click
from loguru import logger

from assemblyscan.engine import scan


@click.command("analyze")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    "--output",
    "-o",
    "outfile",
    type=click.File("w"),
    default="-",
    help="File to write the results to (JSON). Defaults to stdout.",
)
@click.option(
    "--recurse/--no-recurse",
    default=True,
    show_default=True,
    help="Search subdirectories of directories given as PATHS.",
)
@click.option(
    "--max-workers",
    type=click.IntRange(min=1),
    default=None,
    help="Number of files to analyze in parallel. Defaults to the core.max_workers setting.",
)
@click.option(
    "--fail-on-error",
    is_flag=True,
    default=False,
    help="Exit with a non-zero status if any file could not be analyzed.",
)
def analyze(paths, outfile, recurse, max_workers, fail_on_error):
    """Collect name, vendor, and version evidence for the .NET assemblies in PATHS."""
    result = scan(paths, recurse=recurse, max_workers=max_workers)
    outfile.write(result.to_json(indent=2))
    outfile.write("\n")
    logger.info(
        f"Analyzed {len(result.dependencies)} file(s), {len(result.errors)} error(s)"
    )
    if fail_on_error and result.errors:
        sys.exit(1)
