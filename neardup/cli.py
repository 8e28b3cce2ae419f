import time
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import (
    Progress,
    BarColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    MofNCompleteColumn
)

from .config import DEFAULT_CONFIG
from .dedup import is_near_duplicate, jaccard
from .logging_config import setup_logging
from .pipeline import DuplicateIdentifierError, NearDuplicatePipeline
from .processing import MalformedLineError, iter_lines, tokenize_words
from .signatures import HASH_FAMILIES
from .storage import write_pairs_parquet, write_report
from .vocabulary import Vocabulary

app = typer.Typer(add_completion=False, help="Find lines that differ by at most one word.")


def _validate_family(value: str) -> str:
    if value not in HASH_FAMILIES:
        raise typer.BadParameter(f"choose one of: {', '.join(sorted(HASH_FAMILIES))}")
    return value


def _progress() -> Progress:
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=Console(stderr=True),
        transient=True,
    )


@app.command()
def find(
    input_path: str = typer.Argument("-", help="File with one '<id> <words...>' line per sentence; '-' reads stdin."),
    hash_family: str = typer.Option(DEFAULT_CONFIG.hash_family, callback=_validate_family, help="Signature family used for bucket keys: multiplicative or fnv."),
    window: int = typer.Option(DEFAULT_CONFIG.window_size, min=1, help="Tokens hashed at each end of a sentence."),
    workers: int = typer.Option(DEFAULT_CONFIG.workers, min=1, help="Threads for the pairwise bucket scan."),
    max_print: int = typer.Option(DEFAULT_CONFIG.max_print_pairs, help="Print the pairs only when fewer than this many were found."),
    output: Optional[Path] = typer.Option(None, help="Optional parquet file receiving all confirmed pairs."),
    report_path: Optional[Path] = typer.Option(DEFAULT_CONFIG.report_path, help="Write JSON counters for the run."),
    skip_malformed: bool = typer.Option(DEFAULT_CONFIG.skip_malformed, help="Skip lines without a numeric identifier instead of aborting."),
    log_level: str = typer.Option(DEFAULT_CONFIG.log_level, help="Log level for diagnostics on stderr."),
):
    """
    Bucket sentences by head/tail signatures and report pairs with word edit distance <= 1.
    """
    setup_logging(log_level)
    cfg = replace(
        DEFAULT_CONFIG,
        hash_family=hash_family,
        window_size=window,
        workers=workers,
        max_print_pairs=max_print,
        skip_malformed=skip_malformed,
        report_path=report_path,
    )
    pipeline = NearDuplicatePipeline(cfg)

    start = time.perf_counter()
    try:
        with _progress() as progress:
            task = progress.add_task("Reading", total=None)
            pipeline.add_lines(iter_lines(input_path), on_line=lambda: progress.advance(task))
    except (MalformedLineError, DuplicateIdentifierError) as exc:
        typer.echo(f"Aborting: {exc}", err=True)
        raise typer.Exit(code=1)
    except FileNotFoundError as exc:
        typer.echo(f"Input not found: {exc.filename}", err=True)
        raise typer.Exit(code=1)
    except UnicodeDecodeError as exc:
        typer.echo(f"Aborting: input is not valid UTF-8 ({exc.reason} at byte {exc.start})", err=True)
        raise typer.Exit(code=1)
    buckets_created = time.perf_counter()
    typer.echo(
        f"Finished processing file. Created {len(pipeline.bucketer)} buckets in {buckets_created - start:.2f} seconds."
    )

    with _progress() as progress:
        task = progress.add_task("Comparing", total=len(pipeline.bucketer))
        result = pipeline.find_pairs(on_progress=lambda n: progress.advance(task, n))
    finished = time.perf_counter()

    typer.echo(f"Finished comparisons in {finished - buckets_created:.2f} seconds.")
    typer.echo(f"Total duration was {finished - start:.2f} seconds.")
    typer.echo(f"number of pairs with edit distance <= 1: {result.pair_count}")
    if result.pair_count < cfg.max_print_pairs:
        for id1, id2 in result.sorted_pairs():
            typer.echo(f"\t{id1} -> {id2}")

    if output:
        written = write_pairs_parquet(result.pairs, output)
        typer.echo(f"Exported {written} pairs to {output}")
    if report_path:
        stats = dict(result.stats)
        stats["seconds_bucketing"] = round(buckets_created - start, 3)
        stats["seconds_comparing"] = round(finished - buckets_created, 3)
        write_report(stats, report_path)
        typer.echo(f"Wrote report to {report_path}")


@app.command()
def compare(
    first: str = typer.Argument(..., help="First sentence (words only, no identifier)."),
    second: str = typer.Argument(..., help="Second sentence (words only, no identifier)."),
):
    """
    Check whether two sentences are within one word edit of each other.
    """
    vocab = Vocabulary()
    a = vocab.encode_sequence(tokenize_words(first))
    b = vocab.encode_sequence(tokenize_words(second))
    verdict = "near-duplicate" if is_near_duplicate(a, b) else "different"
    typer.echo(f"{verdict} (jaccard={jaccard(a, b):.3f})")


if __name__ == "__main__":
    app()
