"""Command line interface for Niche Vetter."""
from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from .config import EngineConfig
from .history import stability_category
from .market import score_market
from .models import CompetitorRecord, HistoricalAnalysis
from .parsers import parse_competitors, parse_history
from .report import competitor_stats, competitor_summary, export_summary_csv, verdict_to_dict
from .utils import dumps_json

LOG_LEVEL_ENV = "NICHE_VETTER_LOG_LEVEL"


def load_snapshot(path: Path) -> tuple[List[CompetitorRecord], Dict[str, HistoricalAnalysis]]:
    """Read a market snapshot JSON file.

    Raises
    ------
    SystemExit
        If the file is missing or is not valid JSON.
    """

    try:
        data: Dict[str, Any] = json.loads(path.read_text())
    except FileNotFoundError:
        raise SystemExit(f"Snapshot file not found: {path}")
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Snapshot file {path} is not valid JSON: {exc}")
    competitors = parse_competitors(data.get("competitors") or [])
    analyses = parse_history(data.get("history") or {})
    return competitors, analyses


def cmd_score(args: argparse.Namespace) -> None:
    competitors, analyses = load_snapshot(Path(args.snapshot))
    config = EngineConfig.load(Path(args.config) if args.config else None)
    verdict = score_market(competitors, analyses, config=config)
    if args.json:
        print(dumps_json(verdict_to_dict(verdict)))
        return
    print(f"Market verdict: {verdict.status} ({verdict.score:.2f}/100)")
    print(f"Competitors: {len(competitors)}, historical analyses: {len(analyses)}")
    print(f"Base score: {verdict.base_score:.2f}")
    if verdict.auto_fail:
        print(f"Auto-fail: {verdict.auto_fail}")
    for name, delta in verdict.modifiers.items():
        print(f"  {name}: {delta:+.2f}")


def cmd_competitors(args: argparse.Namespace) -> None:
    competitors, _ = load_snapshot(Path(args.snapshot))
    summary = competitor_summary(competitors)
    for _, row in summary.head(args.limit).iterrows():
        print(
            f"ASIN {row['asin']}: score={row['score']:.2f} ({row['strength']}), "
            f"price={row['price']}, reviews={row['reviews']}, rating={row['rating']}"
        )
    if args.stats:
        stats = competitor_stats(summary)
        if stats.empty:
            print("No competitors in snapshot")
        else:
            digest = stats.iloc[0]
            print(
                f"Market: {digest['competitors']} competitors, "
                f"average score={digest['average_score']:.2f}, "
                f"strong={digest['strong']} decent={digest['decent']} weak={digest['weak']}"
            )
            print(f"Top scored: {', '.join(digest['top_scored'])}")
            print(f"Best BSR: {', '.join(digest['best_bsr'])}")
    if args.export:
        export_summary_csv(summary, args.export)
        print(f"Exported competitor scores to {args.export}")


def cmd_history(args: argparse.Namespace) -> None:
    _, analyses = load_snapshot(Path(args.snapshot))
    if not analyses:
        print("No historical series in snapshot")
        return
    for asin, analysis in analyses.items():
        bsr_score = analysis.bsr.score
        price_score = analysis.price.score
        print(
            f"ASIN {asin}: bsr stability={_fmt(bsr_score)} ({stability_category(bsr_score)}), "
            f"price stability={_fmt(price_score)} ({stability_category(price_score)}), "
            f"bsr trend={_fmt(analysis.bsr_trend.trend_pct, '%')}"
        )
        for warning in analysis.warnings():
            print(f"  warning: {warning}")


def _fmt(value: float | None, suffix: str = "") -> str:
    return "n/a" if value is None else f"{value:.2f}{suffix}"


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score whether a marketplace niche is worth entering")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity for engine diagnostics",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    score_parser = subparsers.add_parser("score", help="Compute the market verdict for a snapshot")
    score_parser.add_argument("snapshot", help="Path to a market snapshot JSON file")
    score_parser.add_argument("--config", help="Path to an engine threshold JSON file")
    score_parser.add_argument("--json", action="store_true", help="Print the verdict as JSON")
    score_parser.set_defaults(func=cmd_score)

    competitors_parser = subparsers.add_parser(
        "competitors", help="Score each competitor in a snapshot"
    )
    competitors_parser.add_argument("snapshot", help="Path to a market snapshot JSON file")
    competitors_parser.add_argument("--limit", type=int, default=10)
    competitors_parser.add_argument("--export", help="Export scores to CSV at this path")
    competitors_parser.add_argument(
        "--stats", action="store_true", help="Print a market digest after the scores"
    )
    competitors_parser.set_defaults(func=cmd_competitors)

    history_parser = subparsers.add_parser(
        "history", help="Show stability and trend results per ASIN"
    )
    history_parser.add_argument("snapshot", help="Path to a market snapshot JSON file")
    history_parser.set_defaults(func=cmd_history)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
