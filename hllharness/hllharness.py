#!/usr/bin/env python
from __future__ import annotations
import argparse
import csv
import warnings
from typing import Dict, List, NamedTuple, Optional, Sequence
import numpy as np # type: ignore
import matplotlib # type: ignore
import matplotlib.pyplot as plt # type: ignore
from hllharness.lib.hashfamily import HashFamilyGenerator, HASH_KINDS, SeedLike
from hllharness.lib.stream import StreamSource
from hllharness.lib.exact import ExactCounter
from hllharness.lib.hyperloglog import HyperLogLog, MAX_PRECISION
from hllharness.lib.stats import TrialAccumulator, relative_error

DEFAULT_STREAM_SIZE = 1_000_000
DEFAULT_TRIALS_STREAM_SIZE = 100_000
DEFAULT_FRACTION = 0.05
DEFAULT_PRECISIONS = [6, 10, 14]

# Above this the register array gets large enough to notice
RECOMMENDED_MAX_PRECISION = 16

SEPARATOR = "_" * 26


class BatchRecord(NamedTuple):
    percent: float
    exact: Optional[int]
    estimate: float


class TrialRecord(NamedTuple):
    percent: int
    mean: float
    std: float


def _seed_sequence(seed: SeedLike) -> np.random.SeedSequence:
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(seed)


def run_experiment(precision: int,
                   stream_size: int = DEFAULT_STREAM_SIZE,
                   fraction: float = DEFAULT_FRACTION,
                   hash_kind: str = "affine",
                   seed: SeedLike = None,
                   exact: bool = True,
                   debug: bool = False) -> List[BatchRecord]:
    """Feed one stream to a fresh sketch batch by batch and record its estimates.

    Args:
        precision: HyperLogLog precision (number of index bits)
        stream_size: Number of tokens in the stream
        fraction: Share of the stream produced per batch
        hash_kind: Hash family to draw the sketch's hash function from
        seed: None for OS entropy, or an int / SeedSequence for a reproducible run
        exact: Whether to keep an exact distinct count alongside the sketch
        debug: Whether to print sketch debug information

    Returns:
        One BatchRecord per batch, with the cumulative percentage of the stream
        consumed, the exact count (None if not tracked) and the estimate
    """
    if stream_size > 0 and int(stream_size * fraction) == 0:
        raise ValueError(f"Fraction {fraction} yields empty batches for a stream of {stream_size} tokens")

    stream_seed, hash_seed = _seed_sequence(seed).spawn(2)
    stream = StreamSource(stream_size, seed=stream_seed)
    hasher = HashFamilyGenerator(seed=hash_seed)
    sketch = HyperLogLog(precision, hasher.generate(hash_kind), debug=debug)
    counter = ExactCounter() if exact else None

    records = []
    while not stream.is_finished():
        data = stream.next_portion(fraction)
        sketch.update(data)
        if counter is not None:
            counter.add(data)
        percent = 100.0 * stream.produced / stream_size
        records.append(BatchRecord(percent,
                                   counter.size() if counter is not None else None,
                                   sketch.estimate()))
    return records


def run_trials(precision: int,
               trials: int,
               stream_size: int = DEFAULT_TRIALS_STREAM_SIZE,
               fraction: float = DEFAULT_FRACTION,
               hash_kind: str = "affine",
               seed: SeedLike = None,
               verbose: bool = False) -> List[TrialRecord]:
    """Repeat an experiment on independent streams and summarize the estimates.

    Every trial draws its own stream and hash function. Estimates are binned
    by the percentage of the stream consumed when they were taken.

    Returns:
        One TrialRecord (percent, mean, std) per percentage bin
    """
    if trials < 2:
        raise ValueError("At least 2 trials are needed to summarize estimates")

    accumulator = TrialAccumulator()
    for i, trial_seed in enumerate(_seed_sequence(seed).spawn(trials)):
        records = run_experiment(precision, stream_size, fraction, hash_kind,
                                 seed=trial_seed, exact=False)
        accumulator.extend((r.percent, r.estimate) for r in records)
        if verbose:
            print(f"Trial {i + 1}/{trials}: final estimate {records[-1].estimate:.1f}" if records
                  else f"Trial {i + 1}/{trials}: empty stream")
    return [TrialRecord(*row) for row in accumulator.summaries()]


def print_run(precision: int, records: Sequence[BatchRecord]) -> None:
    print(f"B = {precision}")
    for r in records:
        print(f"{r.percent:g}% {r.exact} {r.estimate}")
    print(SEPARATOR)


def print_trials(precision: int, records: Sequence[TrialRecord]) -> None:
    print(f"B = {precision}")
    for r in records:
        print(f"{r.percent}% E = {r.mean}; sigma = {r.std}")
    print(SEPARATOR)


def write_run_csv(path: str, results: Dict[int, List[BatchRecord]]) -> None:
    """Write single-run trajectories to a CSV file.

    Args:
        path: Output file path
        results: Batch records keyed by precision
    """
    with open(path, "w", newline='') as f:
        writer = csv.writer(f)
        writer.writerow(["precision", "percent", "exact", "estimate", "relative_error"])
        for precision, records in results.items():
            for r in records:
                err = relative_error(r.exact, r.estimate) if r.exact is not None else "NA"
                writer.writerow([precision, r.percent, r.exact, r.estimate, err])


def write_trials_csv(path: str, results: Dict[int, List[TrialRecord]]) -> None:
    """Write per-percentage trial summaries to a CSV file."""
    with open(path, "w", newline='') as f:
        writer = csv.writer(f)
        writer.writerow(["precision", "percent", "mean", "std"])
        for precision, records in results.items():
            for r in records:
                writer.writerow([precision, r.percent, r.mean, r.std])


def plot_runs(path: str, results: Dict[int, List[BatchRecord]]) -> None:
    """Plot exact and estimated distinct counts against stream progress."""
    fig, ax = plt.subplots(figsize=(8, 5))
    exact_drawn = False
    for precision, records in results.items():
        percents = [r.percent for r in records]
        if not exact_drawn and records and records[0].exact is not None:
            ax.plot(percents, [r.exact for r in records], color="black", marker="o", label="exact")
            exact_drawn = True
        ax.plot(percents, [r.estimate for r in records], marker="x", label=f"HLL B={precision}")
    ax.set_xlabel("Stream consumed (%)")
    ax.set_ylabel("Distinct tokens")
    ax.set_title("HyperLogLog estimate vs exact count")
    ax.legend()
    ax.grid(True)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)


def plot_trials(path: str, results: Dict[int, List[TrialRecord]]) -> None:
    """Plot mean estimate with a one-sigma band per precision."""
    fig, ax = plt.subplots(figsize=(8, 5))
    for precision, records in results.items():
        percents = np.array([r.percent for r in records])
        means = np.array([r.mean for r in records])
        stds = np.array([r.std for r in records])
        line, = ax.plot(percents, means, label=f"E(N) B={precision}")
        ax.fill_between(percents, means - stds, means + stds, color=line.get_color(), alpha=0.2)
    ax.set_xlabel("Stream consumed (%)")
    ax.set_ylabel("Estimated distinct tokens")
    ax.set_title("HyperLogLog estimate over repeated trials (mean +/- sigma)")
    ax.legend()
    ax.grid(True)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        description="""Measure HyperLogLog accuracy on a stream of random tokens.

        Without --trials, every precision gets one stream and the sketch estimate
        is printed next to the exact distinct count after each batch.
        With --trials N, every precision is run on N independent streams and the
        mean and standard deviation of the estimates are printed per batch.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    arg_parser.add_argument("--stream_size", "-n", type=int, default=None,
                            help=f"Tokens per stream (default: {DEFAULT_STREAM_SIZE}, "
                                 f"or {DEFAULT_TRIALS_STREAM_SIZE} with --trials)")
    arg_parser.add_argument("--fraction", "-f", type=float, default=DEFAULT_FRACTION,
                            help="Share of the stream fed per batch (0 to 1)")
    arg_parser.add_argument("--precisions", "-p", type=int, nargs='+', default=DEFAULT_PRECISIONS,
                            help="HyperLogLog precisions to sweep")
    arg_parser.add_argument("--trials", "-t", type=int, default=0,
                            help="Number of independent trials per precision (0 for a single run)")
    arg_parser.add_argument("--hash", choices=HASH_KINDS, default="affine", dest="hash_kind",
                            help="Hash family for the sketch")
    arg_parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    arg_parser.add_argument('--outprefix', '-o', '--out', type=str, default=None, help='The output file prefix')
    arg_parser.add_argument("--plot", action="store_true", help="Also write plots (requires --outprefix)")
    arg_parser.add_argument("--verbose", action="store_true", help="Print verbose output")
    arg_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    args = arg_parser.parse_args(argv)

    if args.stream_size is None:
        args.stream_size = DEFAULT_TRIALS_STREAM_SIZE if args.trials else DEFAULT_STREAM_SIZE
    if args.stream_size < 0:
        arg_parser.error("--stream_size must be non-negative")
    if not 0.0 < args.fraction <= 1.0:
        arg_parser.error("--fraction must be in (0, 1]")
    if args.stream_size > 0 and int(args.stream_size * args.fraction) == 0:
        arg_parser.error(f"--fraction {args.fraction} is too small for a stream of {args.stream_size} tokens")
    if args.trials == 1 or args.trials < 0:
        arg_parser.error("--trials must be 0 (single run) or at least 2")
    for precision in args.precisions:
        if precision < 1 or precision > MAX_PRECISION:
            arg_parser.error(f"Precision {precision} must be between 1 and {MAX_PRECISION}")

    return args


def main(argv: Optional[List[str]] = None):
    """Main entry point for hllharness."""
    args = parse_args(argv)

    for precision in args.precisions:
        if precision > RECOMMENDED_MAX_PRECISION:
            warnings.warn(f"Precision {precision} allocates {1 << precision} registers per sketch. "
                          "This may be slow.", RuntimeWarning)

    if args.plot and not args.outprefix:
        warnings.warn("--plot requires --outprefix; skipping plots", RuntimeWarning)
        args.plot = False
    if args.plot:
        # Set matplotlib backend for non-interactive use
        matplotlib.use('Agg')

    if args.verbose:
        mode = f"{args.trials} trials" if args.trials else "single run"
        print(f"Stream size {args.stream_size}, fraction {args.fraction}, {args.hash_kind} hash, {mode}")

    # Each precision gets its own child seed sequence
    seeds = np.random.SeedSequence(args.seed).spawn(len(args.precisions))

    if args.trials:
        trial_results: Dict[int, List[TrialRecord]] = {}
        for precision, seed in zip(args.precisions, seeds):
            records = run_trials(precision, args.trials, args.stream_size, args.fraction,
                                 args.hash_kind, seed=seed, verbose=args.verbose)
            print_trials(precision, records)
            trial_results[precision] = records
        if args.outprefix:
            write_trials_csv(f"{args.outprefix}_trials.csv", trial_results)
            if args.plot:
                plot_trials(f"{args.outprefix}_trials.png", trial_results)
    else:
        run_results: Dict[int, List[BatchRecord]] = {}
        for precision, seed in zip(args.precisions, seeds):
            records = run_experiment(precision, args.stream_size, args.fraction,
                                     args.hash_kind, seed=seed, debug=args.debug)
            print_run(precision, records)
            run_results[precision] = records
        if args.outprefix:
            write_run_csv(f"{args.outprefix}_run.csv", run_results)
            if args.plot:
                plot_runs(f"{args.outprefix}_run.png", run_results)

    if args.outprefix and args.verbose:
        print(f"Results written with prefix {args.outprefix}")

if __name__ == "__main__":
    main()
