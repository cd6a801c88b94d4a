import sys
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Optional

import humanize
import typer
from loguru import logger

from missing_files.algorithms import DEFAULT_ALGORITHM, Algorithm
from missing_files.compare import ComparisonResult, compare_trees
from missing_files.config import DEFAULT_MAX_DEPTH, CompareConfig, ErrorPolicy
from missing_files.errors import ComparisonError

app = typer.Typer(help="Find files in an old folder whose content is missing from a new folder")


class Command(StrEnum):
    COMPARE = "compare"
    ALGORITHMS = "algorithms"


OldFolderOption = Annotated[Path, typer.Option("--old-folder", "-o", help="Folder that was copied or migrated")]
NewFolderOption = Annotated[Path, typer.Option("--new-folder", "-n", help="Folder that should contain every old file")]
MaxDepthOption = Annotated[int, typer.Option("--max-depth", "-d", help="Maximum recursion depth; 1 scans only the top level")]
AlgorithmOption = Annotated[Algorithm, typer.Option("--algorithm", "-a", help="Checksum algorithm")]
SkipErrorsOption = Annotated[bool, typer.Option("--skip-errors", help="Skip unreadable entries instead of aborting")]
JobsOption = Annotated[Optional[int], typer.Option("--jobs", "-j", help="Number of hashing workers")]
SaveDigestsOption = Annotated[Optional[Path], typer.Option("--save-digests", help="Directory to write digest tables to")]
NoProgressOption = Annotated[bool, typer.Option("--no-progress", help="Hide progress bars")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Quiet output")]


def configure_logging(verbose, quiet):
    """Configure logging based on verbosity settings."""
    log_levels = {
        (True, False): "DEBUG",  # verbose=True, quiet=False
        (False, True): "WARNING",  # verbose=False, quiet=True
    }
    log_level = log_levels.get((verbose, quiet), "INFO")
    logger.remove()
    logger.add(sys.stderr, level=log_level)


def print_report(result: ComparisonResult):
    if result.missing:
        typer.echo(f"Missing files ({humanize.intcomma(len(result.missing))}):")
        for path in result.missing:
            typer.echo(f"  {path}")
    else:
        typer.echo("No missing files")
    if result.skipped:
        typer.echo(f"Skipped ({humanize.intcomma(len(result.skipped))}), results may be incomplete:")
        for skipped in result.skipped:
            typer.echo(f"  [{skipped.stage}] {skipped.path}: {skipped.reason}")


@app.command(Command.COMPARE.value)
def compare(
    old_folder: OldFolderOption,
    new_folder: NewFolderOption,
    max_depth: MaxDepthOption = DEFAULT_MAX_DEPTH,
    algorithm: AlgorithmOption = DEFAULT_ALGORITHM,
    skip_errors: SkipErrorsOption = False,
    jobs: JobsOption = None,
    save_digests: SaveDigestsOption = None,
    no_progress: NoProgressOption = False,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
):
    """Report every old file whose content is not found anywhere in the new folder."""
    configure_logging(verbose, quiet)
    config = CompareConfig(
        old_folder=old_folder,
        new_folder=new_folder,
        max_depth=max_depth,
        algorithm=algorithm,
        on_error=ErrorPolicy.SKIP if skip_errors else ErrorPolicy.FAIL,
        n_jobs=jobs,
        progress_bar=not no_progress,
        save_digests=save_digests,
    )

    typer.echo(f"Using {algorithm} for checksums")
    typer.echo(f"Old folder: {old_folder}")
    typer.echo(f"New folder: {new_folder}")

    try:
        result = compare_trees(config)
    except ComparisonError as err:
        logger.error(f"{type(err).__name__}: {err}")
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1)

    print_report(result)


@app.command(Command.ALGORITHMS.value)
def list_algorithms():
    """List the available checksum algorithms."""
    for algorithm in Algorithm:
        suffix = " (default)" if algorithm is DEFAULT_ALGORITHM else ""
        typer.echo(f"{algorithm.value}{suffix}")


def main():
    app()


if __name__ == "__main__":
    main()
