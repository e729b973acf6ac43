"""Example driving the monitor in real time with simulated telemetry."""

from __future__ import annotations

import argparse
import asyncio

from traction_ai import SimulatedSampleGenerator, TickScheduler, TractionMonitor, load_settings
from traction_ai.logging import setup_logging
from traction_ai.recommender import Classification
from traction_ai.telemetry import Sample


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(__doc__)
    parser.add_argument("--ticks", type=int, default=15, help="Number of samples to process.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument("--interval", type=float, default=0.5, help="Seconds between ticks.")
    return parser


def _print_tick(sample: Sample, classification: Classification) -> None:
    print(
        f"{sample.timestamp}  slip {sample.slip_ratio:5.1f}%  "
        f"{classification.status.value.upper():<8} {classification.recommendation}"
    )


async def run(args: argparse.Namespace) -> None:
    settings = load_settings(overrides={"scheduler": {"interval": args.interval}, "analysis": {"delay": 1.0}})
    monitor = TractionMonitor(settings)
    scheduler = TickScheduler(
        monitor,
        SimulatedSampleGenerator(args.seed),
        max_ticks=args.ticks,
        on_tick=_print_tick,
    )
    task = scheduler.start()
    # Ask for an analysis while ticks keep arriving.
    await asyncio.sleep(args.interval * min(args.ticks, 10))
    analysis = await monitor.request_analysis()
    print(f"\n{analysis.advisory}\n")
    await task
    print(f"Final status: {monitor.get_status().value}  ({monitor.get_recommendation()})")


def main(args: argparse.Namespace | None = None) -> None:
    if args is None:
        args = _build_parser().parse_args()
    setup_logging({"logging": {"level": "warning", "format": "text"}})
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
