"""
Paired-end FASTQ merger.

Finds matching R1/R2 FASTQ files in a directory, merges every read pair
of every sample in parallel, and writes the merged reads, the unmerged
pairs, and merge statistics.
"""

import argparse
import logging
import os
from multiprocessing import Pool, cpu_count
from os import PathLike
from os.path import basename
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple, Union

import matplotlib.pyplot as plt
import pandas as pd

from .barcode import read_index
from .constants import MAX_LOW_QUAL_DIFF, MIN_OVERLAP
from .fastq import FASTQParseError, open_fastq, read_fastq_pairs, write_fastq
from .merge_counts import MergeCounts
from .plots import merge_rate_plot, overlap_histogram
from .read_pair import MergeSettings

logger = logging.getLogger(__name__)

# Pairs processed per sample in debug mode
DEBUG_PAIR_LIMIT = 100000
PROGRESS_INTERVAL = 100000


def sample_name_from_r1(r1_path: str) -> str:
    """Derive the sample name from an R1 file name."""
    name = basename(r1_path)
    for suffix in ('.fastq.gz', '.fq.gz', '.fastq', '.fq'):
        if name.endswith(suffix):
            name = name[:-len(suffix)]
            break
    for tag in ('_R1_001', '_R1'):
        if tag in name:
            return name.replace(tag, '', 1)
    return name


def merge_fastq_files(
    r1_fn: str,
    r2_fn: str,
    sample: str,
    output_path: Union[PathLike, str],
    settings: MergeSettings,
    index_whitelist: Optional[List[str]] = None,
    index_error_threshold: int = 1,
    debug: bool = False,
) -> MergeCounts:
    """
    Merge all read pairs of one sample.

    Writes ``<sample>.merged.fastq.gz`` with the consensus reads and
    ``<sample>.unmerged_R1.fastq.gz`` / ``<sample>.unmerged_R2.fastq.gz``
    with the pairs that did not overlap, unchanged.

    Parameters
    ----------
    r1_fn, r2_fn : str
        R1 and R2 FASTQ files of the sample.
    sample : str
        Sample name, used for output file names and counts.
    output_path : PathLike or str
        Directory for the output FASTQ files.
    settings : MergeSettings
        Overlap search settings.
    index_whitelist : list of str, optional
        Known sample indexes used to correct the index in read names.
    index_error_threshold : int, default 1
        Maximum Hamming distance for index correction.
    debug : bool, default False
        Only process the first DEBUG_PAIR_LIMIT pairs.

    Returns
    -------
    MergeCounts
        Merge statistics for the sample.
    """
    output_path = Path(output_path)
    counts = MergeCounts(sample)

    merged_fn = output_path / f"{sample}.merged.fastq.gz"
    unmerged_r1_fn = output_path / f"{sample}.unmerged_R1.fastq.gz"
    unmerged_r2_fn = output_path / f"{sample}.unmerged_R2.fastq.gz"
    output_files = (merged_fn, unmerged_r1_fn, unmerged_r2_fn)

    try:
        with open_fastq(merged_fn, 'wt') as merged_fh, \
                open_fastq(unmerged_r1_fn, 'wt') as r1_fh, \
                open_fastq(unmerged_r2_fn, 'wt') as r2_fh:
            for pair_num, pair in enumerate(read_fastq_pairs(r1_fn, r2_fn)):
                if pair_num % PROGRESS_INTERVAL == 0 and pair_num > 0:
                    logger.info(f"{sample}: {pair_num:,} pairs processed...")

                if debug and pair_num >= DEBUG_PAIR_LIMIT:
                    break

                merged, overlap = pair.merge_with_overlap(settings)
                if merged is not None:
                    write_fastq(merged_fh, merged)
                else:
                    if debug:
                        logger.debug(f"{sample}: no overlap for {pair.left.name}")
                    write_fastq(r1_fh, pair.left)
                    write_fastq(r2_fh, pair.right)

                counts.record(
                    read_index(pair.left, index_whitelist, index_error_threshold),
                    overlap,
                )
    except (FASTQParseError, OSError):
        # Partial output would not match any counts
        for fn in output_files:
            fn.unlink(missing_ok=True)
        raise

    return counts


class MergePairedFASTQ:
    """
    Merge paired-end FASTQ files with multiprocessing support.

    Every sample (one R1/R2 file pair) is handled by its own worker
    process. Within a sample, pairs are merged one at a time with
    :meth:`pairmerge.ReadPair.merge`.

    Parameters
    ----------
    fastq_path : PathLike or str
        Directory containing paired FASTQ files (``*_R1.fastq.gz`` with a
        matching ``*_R2.fastq.gz``, or the ``*_R1_*`` / plain ``.fastq``
        variants).
    output_path : PathLike or str
        Directory for merged and unmerged FASTQ output.
    debug : bool, default False
        Enable debug mode (limits pairs processed, extra logging).
    min_overlap : int, default MIN_OVERLAP
        Shortest overlap accepted.
    max_low_qual_diff : int, default MAX_LOW_QUAL_DIFF
        Number of high/low quality mismatches that rejects an overlap.
    max_quality : int, optional
        Clamp summed qualities of agreeing bases to this Phred score.
    index_whitelist : list of str, optional
        Known sample indexes for index correction.
    index_error_threshold : int, default 1
        Maximum Hamming distance for index correction.
    num_cores : int, optional
        Number of CPU cores for parallel processing.
        Defaults to (available cores - 2).

    Attributes
    ----------
    outcome_counts_df : pd.DataFrame
        Merged/unmerged pair counts (rows) per sample (columns).
    overlap_counts_df : pd.DataFrame
        Merged pair counts per overlap length.
    index_counts_df : pd.DataFrame
        Pair counts per index.
    """

    def __init__(
        self,
        fastq_path: Union[PathLike, str],
        output_path: Union[PathLike, str],
        debug: bool = False,
        min_overlap: int = MIN_OVERLAP,
        max_low_qual_diff: int = MAX_LOW_QUAL_DIFF,
        max_quality: Optional[int] = None,
        index_whitelist: Optional[List[str]] = None,
        index_error_threshold: int = 1,
        num_cores: Optional[int] = None,
    ):
        self._debug = debug
        self._fastq_path = Path(fastq_path)
        self._output_path = Path(output_path)
        self._index_whitelist = index_whitelist or []
        self._index_error_threshold = index_error_threshold
        self._settings = MergeSettings(
            min_overlap=min_overlap,
            max_low_qual_diff=max_low_qual_diff,
            max_quality=max_quality,
        )

        if self._debug:
            logger.info("Running in DEBUG mode")

        # Determine number of cores
        if num_cores is None:
            if hasattr(os, 'sched_getaffinity'):
                self._num_cores = max(1, len(os.sched_getaffinity(0)) - 2)
            else:
                self._num_cores = max(1, cpu_count() - 2)
        else:
            self._num_cores = num_cores
        logger.info(f"Using {self._num_cores} cores for parallel processing")

        self._find_fastq_files()

        self.outcome_counts_df = pd.DataFrame()
        self.overlap_counts_df = pd.DataFrame()
        self.index_counts_df = pd.DataFrame()

    @property
    def settings(self) -> MergeSettings:
        return self._settings

    @property
    def samples(self) -> List[str]:
        return [self._r1_path_to_sample[r1] for r1 in self._r1_file_list]

    def _find_fastq_files(self) -> None:
        """Locate R1 and matching R2 FASTQ files in the input directory."""
        if not self._fastq_path.exists():
            raise FileNotFoundError(f"FASTQ path does not exist: {self._fastq_path}")

        r1_files = []
        for pattern in ("*_R1.fastq.gz", "*_R1_*.fastq.gz", "*_R1.fastq", "*_R1_*.fastq"):
            r1_files = sorted(str(f) for f in self._fastq_path.glob(pattern))
            if r1_files:
                break

        if not r1_files:
            raise FASTQParseError(f"No R1 FASTQ files found in {self._fastq_path}")

        self._r1_file_list: List[str] = []
        self._r2_file_list: List[str] = []
        for r1_path in r1_files:
            r2_path = r1_path.replace('_R1.', '_R2.').replace('_R1_', '_R2_')
            if os.path.exists(r2_path):
                self._r1_file_list.append(r1_path)
                self._r2_file_list.append(r2_path)
            else:
                logger.warning(f"No R2 file for {r1_path}, skipping")

        if not self._r1_file_list:
            raise FASTQParseError(f"No paired R1/R2 FASTQ files found in {self._fastq_path}")

        logger.info(f"Found {len(self._r1_file_list)} paired FASTQ files")

        self._r1_path_to_sample: Dict[str, str] = {
            r1: sample_name_from_r1(r1) for r1 in self._r1_file_list
        }

    def read(self) -> None:
        """
        Merge all samples and aggregate statistics.

        Uses multiprocessing to merge samples in parallel. Results are
        stored in the ``*_counts_df`` attributes.
        """
        self._output_path.mkdir(parents=True, exist_ok=True)

        arguments = []
        for r1_fn, r2_fn in zip(self._r1_file_list, self._r2_file_list):
            arguments.append((
                r1_fn,
                r2_fn,
                self._r1_path_to_sample[r1_fn],
                str(self._output_path),
                self._settings,
                self._index_whitelist,
                self._index_error_threshold,
                self._debug,
            ))

        logger.info(f"Merging {len(arguments)} samples...")

        with Pool(processes=self._num_cores) as pool:
            sample_counts = pool.starmap(self._merge_sample, arguments)

        valid_counts = [c for c in sample_counts if c is not None]
        num_failed = len(sample_counts) - len(valid_counts)
        if not valid_counts:
            logger.warning(f"All {num_failed} samples failed, no merge statistics collected")
            return
        if num_failed:
            logger.warning(f"{num_failed} of {len(sample_counts)} samples failed and were skipped")

        combined = valid_counts[0]
        for counts in valid_counts[1:]:
            combined.update(counts)

        self.outcome_counts_df = combined.outcome_counts()
        self.overlap_counts_df = combined.overlap_counts()
        self.index_counts_df = combined.index_counts()

        logger.info(
            f"Merged {combined.merged_pairs:,} of {combined.total_pairs:,} pairs "
            f"across {len(valid_counts)} samples"
        )

    @staticmethod
    def _merge_sample(
        r1_fn: str,
        r2_fn: str,
        sample: str,
        output_path: str,
        settings: MergeSettings,
        index_whitelist: List[str],
        index_error_threshold: int,
        debug: bool,
    ) -> Optional[MergeCounts]:
        """
        Merge one sample and return its counts.

        This is a static method to enable multiprocessing.
        """
        try:
            counts = merge_fastq_files(
                r1_fn,
                r2_fn,
                sample,
                output_path,
                settings,
                index_whitelist=index_whitelist,
                index_error_threshold=index_error_threshold,
                debug=debug,
            )
        except (FASTQParseError, OSError) as e:
            logger.error(f"Error processing {r1_fn}: {e}")
            return None

        logger.info(
            f"{sample}: Complete - {counts.merged_pairs:,} of {counts.total_pairs:,} pairs merged"
        )
        return counts

    def serialize(
        self,
        results_path: Union[PathLike, str],
        format: Literal['excel', 'csv'] = 'excel',
    ) -> None:
        """
        Save merge statistics to disk.

        Parameters
        ----------
        results_path : PathLike or str
            Directory to save results.
        format : {'excel', 'csv'}, default 'excel'
            Output format.
        """
        if format not in ('excel', 'csv'):
            raise ValueError(f"Unknown output format: {format}")

        results_path = Path(results_path)
        results_path.mkdir(parents=True, exist_ok=True)

        tables: Tuple[Tuple[str, pd.DataFrame], ...] = (
            ('merge_outcomes', self.outcome_counts_df),
            ('overlap_lengths', self.overlap_counts_df),
            ('index_counts', self.index_counts_df),
        )
        for name, df in tables:
            if format == 'excel':
                df.to_excel(results_path / f'{name}.xlsx')
            else:
                df.to_csv(results_path / f'{name}.csv')

        logger.info(f"Results saved to {results_path}")

    def plot(self, results_path: Union[PathLike, str], dpi: int = 200) -> List[Path]:
        """
        Save the overlap length histogram and the merge rate plot as PNG.

        Plots whose table is empty (e.g. no pair merged) are skipped.

        Returns
        -------
        list of Path
            Files written.
        """
        results_path = Path(results_path)
        results_path.mkdir(parents=True, exist_ok=True)

        written = []
        for name, plot_func, df in (
            ('overlap_lengths', overlap_histogram, self.overlap_counts_df),
            ('merge_rate', merge_rate_plot, self.outcome_counts_df),
        ):
            if df.empty:
                logger.warning(f"No data for {name} plot, skipping")
                continue
            outpath = results_path / f'{name}.png'
            fig, _ = plot_func(df, title=name.replace('_', ' ').capitalize(), outpath=outpath, dpi=dpi)
            plt.close(fig)
            written.append(outpath)

        return written

    def print_summary(self) -> None:
        """Print a summary of the merge run."""
        print(f"FASTQ Path: {self._fastq_path}")
        print(f"Samples: {len(self._r1_file_list)}")
        print(f"Minimum overlap: {self._settings.min_overlap}")
        if len(self.outcome_counts_df) > 0:
            totals = self.outcome_counts_df.sum(axis=1)
            merged = int(totals.get('merged', 0))
            total = int(totals.sum())
            print(f"Merged pairs: {merged:,} of {total:,} ({merged / max(total, 1):.1%})")
        if len(self.overlap_counts_df) > 0:
            overlaps = self.overlap_counts_df.sum(axis=1)
            mean_overlap = (overlaps.index.to_series() * overlaps).sum() / overlaps.sum()
            print(f"Mean overlap: {mean_overlap:.1f} bp")


def main():
    """Command-line interface for MergePairedFASTQ."""
    parser = argparse.ArgumentParser(
        description='Merge overlapping paired-end reads in FASTQ files'
    )

    parser.add_argument(
        '-f', '--fastq_path',
        required=True,
        help='Path to directory containing paired FASTQ files',
    )
    parser.add_argument(
        '-o', '--output_path',
        required=True,
        help='Path to output directory for merged FASTQ files',
    )
    parser.add_argument(
        '--results_path',
        default=None,
        help='Path to directory for merge statistics (defaults to output_path)',
    )
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        help='Enable debug mode',
    )
    parser.add_argument(
        '--min_overlap',
        type=int,
        default=MIN_OVERLAP,
        help='Minimum overlap length for merging',
    )
    parser.add_argument(
        '--max_low_qual_diff',
        type=int,
        default=MAX_LOW_QUAL_DIFF,
        help='Number of high/low quality mismatches that rejects an overlap',
    )
    parser.add_argument(
        '--max_quality',
        type=int,
        default=None,
        help='Clamp merged base qualities to this Phred score',
    )
    parser.add_argument(
        '--index_whitelist',
        nargs='+',
        default=None,
        help='Known sample indexes for index correction',
    )
    parser.add_argument(
        '--index_error_threshold',
        type=int,
        default=1,
        help='Maximum Hamming distance for index correction',
    )
    parser.add_argument(
        '--num_cores',
        type=int,
        default=None,
        help='Number of CPU cores',
    )
    parser.add_argument(
        '--format',
        choices=['excel', 'csv'],
        default='excel',
        help='Output format for merge statistics',
    )
    parser.add_argument(
        '--plot',
        action='store_true',
        help='Save overlap length and merge rate plots with the statistics',
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    merger = MergePairedFASTQ(
        fastq_path=args.fastq_path,
        output_path=args.output_path,
        debug=args.debug,
        min_overlap=args.min_overlap,
        max_low_qual_diff=args.max_low_qual_diff,
        max_quality=args.max_quality,
        index_whitelist=args.index_whitelist,
        index_error_threshold=args.index_error_threshold,
        num_cores=args.num_cores,
    )

    merger.read()
    results_path = args.results_path or args.output_path
    merger.serialize(results_path, format=args.format)
    if args.plot:
        merger.plot(results_path)
    merger.print_summary()


if __name__ == '__main__':
    main()
