from pathlib import Path

import polars as pl
from loguru import logger

from missing_files.checksums import ChecksumRun

DIGEST_SCHEMA = {"path": pl.Utf8, "digest": pl.Utf8}


def save_digests(run: ChecksumRun, save_path: Path) -> Path:
    """
    Save the (path, digest) table of one checksum run as parquet.

    Args:
        run: Completed checksum run; skipped files are left out
        save_path: Destination parquet file

    Returns:
        The path written
    """
    save_path = Path(save_path)
    logger.info(f"Saving digest information to {save_path}")
    save_path.parent.mkdir(parents=True, exist_ok=True)
    pairs = run.pairs()
    df = pl.DataFrame(
        {"path": [p for p, _ in pairs], "digest": [d for _, d in pairs]},
        schema=DIGEST_SCHEMA,
    ).with_columns(pl.lit(str(run.algorithm)).alias("algorithm"))
    df.write_parquet(save_path)
    logger.info(f"Saved {df.height} entries to {save_path}")
    return save_path


def load_digests(save_path: Path) -> list[tuple[str, str]]:
    """Read an exported digest table back as (path, digest) pairs, e.g. to reuse a previous run."""
    df = pl.read_parquet(save_path, columns=["path", "digest"])
    return list(df.iter_rows())
