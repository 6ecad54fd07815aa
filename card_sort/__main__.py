"""
CLI entry point for the card sort system.

Runs a sort session against a simulated or dummy judge, persisting the
session under an output directory so an interrupted run resumes.
"""

import argparse
import sys
from argparse import Namespace
from pathlib import Path
from typing import TypedDict

from prettytable import PrettyTable

from .exceptions import CardSortError, ConfigurationError
from .interfaces import Judge
from .judges.dummy_judge import DummyJudge
from .judges.sim_judge import SimulatedJudge
from .logging_config import get_logger, setup_logging
from .orchestrator import SessionConfig, SortSession
from .rankers.bradley_terry_ranker import get_confidence_info, get_inconsistency_level
from .storage.json_storage import JSONStorage
from .stopping import has_extended_comparisons


class CLIArgs(TypedDict):
    """Typed representation of parsed CLI arguments."""
    cards_file: str | None
    num_cards: int
    output_dir: str | None
    judge_type: str
    noise: float
    lapse_rate: float
    seed: int | None
    min_comparisons: int | None
    max_comparisons: int | None
    debug: bool
    log_level: str


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Card Sort - Adaptive Bradley-Terry pairwise ranking"
    )

    source = parser.add_mutually_exclusive_group()
    _ = source.add_argument(
        "--cards-file",
        help="File with one card id per line"
    )
    _ = source.add_argument(
        "--num-cards",
        type=int,
        default=12,
        help="Number of generated cards when no file is given (default: 12)"
    )
    _ = parser.add_argument(
        "--output-dir",
        help="Directory for the session snapshot and comparison log (omit to keep nothing)"
    )
    _ = parser.add_argument(
        "--judge-type",
        choices=["simulated", "dummy"],
        default="simulated",
        help="Type of judge to use (default: simulated)"
    )
    _ = parser.add_argument(
        "--noise",
        type=float,
        default=0.0,
        help="Choice noise of the simulated judge (default: 0)"
    )
    _ = parser.add_argument(
        "--lapse-rate",
        type=float,
        default=0.0,
        help="Probability the simulated judge answers backwards (default: 0)"
    )
    _ = parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for the judge"
    )
    _ = parser.add_argument(
        "--min-comparisons",
        type=int,
        help="Minimum comparisons before stopping (default: ceil(0.8 * cards))"
    )
    _ = parser.add_argument(
        "--max-comparisons",
        type=int,
        help="Comparison ceiling (default: ceil(2.0 * cards))"
    )
    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set logging level (default: INFO)"
    )

    return parser.parse_args(argv)


def args_to_typed(ns: Namespace) -> CLIArgs:
    """Convert argparse Namespace to typed CLIArgs."""
    return CLIArgs(
        cards_file=ns.cards_file,
        num_cards=ns.num_cards,
        output_dir=ns.output_dir,
        judge_type=ns.judge_type,
        noise=ns.noise,
        lapse_rate=ns.lapse_rate,
        seed=ns.seed,
        min_comparisons=ns.min_comparisons,
        max_comparisons=ns.max_comparisons,
        debug=ns.debug,
        log_level=ns.log_level,
    )


def load_card_ids(args: CLIArgs) -> list[str]:
    """Read card ids from the cards file, or generate card_01..card_NN."""
    if args["cards_file"] is None:
        return [f"card_{i:02d}" for i in range(1, args["num_cards"] + 1)]

    path = Path(args["cards_file"])
    if not path.exists():
        raise ConfigurationError(f"cards file does not exist: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def build_judge(args: CLIArgs, card_ids: list[str]) -> Judge:
    """Create the judge selected on the command line."""
    if args["judge_type"] == "simulated":
        # Ground truth: earlier cards in the file are stronger
        n = len(card_ids)
        ground_truth = {card_id: float(n - i) for i, card_id in enumerate(card_ids)}
        return SimulatedJudge(
            ground_truth,
            noise=args["noise"],
            lapse_rate=args["lapse_rate"],
            seed=args["seed"],
        )
    if args["judge_type"] == "dummy":
        return DummyJudge(mode="deterministic")
    raise ConfigurationError(f"Unknown judge type: {args['judge_type']}")


def print_results(session: SortSession, ranking: list[str]) -> None:
    """Print the final ranking table and session summary."""
    state = session.state
    table = PrettyTable()
    table.field_names = ["Rank", "Card ID", "Strength", "Uncertainty", "Appearances"]
    table.align["Rank"] = "r"
    table.align["Strength"] = "r"
    table.align["Uncertainty"] = "r"
    table.align["Appearances"] = "r"

    for rank, card_id in enumerate(ranking, 1):
        table.add_row([
            rank,
            card_id,
            f"{state.strength_of(card_id):.3f}",
            f"{state.uncertainty_of(card_id):.3f}",
            state.appearances_of(card_id),
        ])
    print(table)

    info = get_confidence_info(state)
    level = get_inconsistency_level(state)
    print(f"Comparisons: {state.used} (cycles: {state.cycle_count})")
    print(f"Top-5 confidence: {info.top5_confidence:.0%}, top-11 confidence: {info.top11_confidence:.0%}")
    print(f"Consistency: {level.label}")
    if has_extended_comparisons(state):
        print("Comparison budget was extended because of inconsistent choices")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = args_to_typed(parse_args(argv))
    setup_logging(level=args["log_level"], debug=args["debug"])
    logger = get_logger("main")

    try:
        card_ids = load_card_ids(args)
        judge = build_judge(args, card_ids)
        storage = None
        if args["output_dir"]:
            output_dir = Path(args["output_dir"])
            storage = JSONStorage(output_dir / "latest_snapshot.json", output_dir / "comparisons.jsonl")
        config = SessionConfig(
            min_comparisons=args["min_comparisons"],
            max_comparisons=args["max_comparisons"],
        )

        print("Card Sort - Adaptive Bradley-Terry pairwise ranking")
        print("=" * 60)
        print(f"Cards: {len(card_ids)}")
        print(f"Judge type: {args['judge_type']}")
        if args["judge_type"] == "simulated":
            print(f"Noise: {args['noise']}, lapse rate: {args['lapse_rate']}")
        print(f"Output directory: {args['output_dir'] or '(none)'}")
        print("=" * 60)

        session = SortSession(card_ids, judge, storage=storage, config=config)
        session.start()
        if session.resumed:
            print(f"Resumed from snapshot: {session.state.used} comparisons recorded")
        ranking = session.run()

        print("\nFinal Ranking:")
        print_results(session, ranking)

    except CardSortError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Session interrupted by user")
        print("\nSession interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
