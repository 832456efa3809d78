from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import Algorithm, parse_algorithm, run_algorithm
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_results
from .models import ScheduleResult
from .workload_io import load_workload, write_results

logger = logging.getLogger(__name__)

DEFAULT_STEP_DELAY = 0.3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="burst-scheduler",
        description="Single-CPU batch scheduling simulator (SJF, SRTF).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log more detail (-v for progress, -vv for every scheduling decision).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Schedule a workload file and write the results.")
    run_parser.add_argument("input", help="Workload file (id arrival burst triplets, or .json / .csv).")
    run_parser.add_argument("output", help="Where to write 'id arrival finish waiting' lines.")
    run_parser.add_argument("algorithm", help="Scheduling algorithm: SJF or SRTF.")
    run_parser.add_argument(
        "limit",
        nargs="?",
        type=int,
        default=None,
        help="Read at most this many processes from the input.",
    )
    run_parser.add_argument(
        "--gantt",
        action="store_true",
        help="Print the Gantt chart and the per-process table.",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=DEFAULT_STEP_DELAY,
        help=f"Seconds to wait between steps when --step is used (default: {DEFAULT_STEP_DELAY}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run both algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument("input", help="Workload file (id arrival burst triplets, or .json / .csv).")
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=[a.value for a in Algorithm],
        help="Algorithms to compare (default: SJF SRTF).",
    )
    compare_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=None,
        help="Read at most this many processes from the input.",
    )

    return parser


def configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _print_summary(console: Console, input_path: str, result: ScheduleResult, limit: Optional[int]) -> None:
    summary = summarize_results(result.processes)

    header = f'scheduled "{escape(input_path)}" using {result.algorithm}'
    if limit is not None:
        header += f" with depth {limit}"
    console.print(header, soft_wrap=True, highlight=False)
    console.print(f"....avg wait time = {summary['avg_waiting']:.3f} ms", highlight=False)
    console.print(f"....avg turn time = {summary['avg_turnaround']:.3f} ms", highlight=False)


def _print_result(console: Console, result: ScheduleResult) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["ID", "Arrive", "Burst", "Finish", "Wait", "Turnaround"]

    proc_table = Table(title="Per-process results", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "ID" else "right")

    for p in result.processes:
        proc_table.add_row(
            str(p.id),
            str(p.arrival_time),
            str(p.burst_time),
            str(p.finish_time),
            str(p.waiting_time),
            str(p.turnaround_time),
        )

    console.print(proc_table)

    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        console.print(sys_table)


def _animate_result(console: Console, result: ScheduleResult, delay: float) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    timeline = sorted(result.timeline, key=lambda s: (s.start_time, s.end_time))
    if not timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    origin = timeline[0].start_time
    makespan = max(s.end_time for s in timeline)
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (t={origin}..{makespan})")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(origin, makespan):
        running = next((sl for sl in timeline if sl.start_time <= t < sl.end_time), None)
        if running is None:
            console.print(f"t={t:3d}: [idle]", markup=False)
        else:
            bar = "█" * (t - running.start_time + 1)
            console.print(f"t={t:3d}: P{running.id} [green]{bar}[/green]")
        time.sleep(delay)


def _run(args: argparse.Namespace, console: Console) -> int:
    algorithm = parse_algorithm(args.algorithm)
    processes = load_workload(args.input, limit=args.limit)
    result = run_algorithm(algorithm, processes)
    write_results(args.output, result.processes)
    logger.debug("%s", render_gantt(result.timeline))

    if args.step:
        try:
            _animate_result(console, result, delay=args.step_delay)
        except KeyboardInterrupt:
            console.print("[yellow]Animation skipped.[/yellow]")
    if args.gantt:
        _print_result(console, result)
        console.print()

    _print_summary(console, args.input, result, args.limit)
    return 0


def _compare(args: argparse.Namespace, console: Console) -> int:
    algorithms: List[Algorithm] = [parse_algorithm(name) for name in args.algorithms]
    processes = load_workload(args.input, limit=args.limit)

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("CPU utilization", justify="right")

    for algorithm in algorithms:
        result = run_algorithm(algorithm, processes)
        summary = summarize_results(result.processes)
        utilization = result.system.cpu_utilization if result.system else 0.0
        summary_table.add_row(
            result.algorithm,
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{utilization*100:.1f}%",
        )

    console.print(summary_table)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    if args.command == "run" and args.limit is not None and args.limit < 0:
        parser.error("limit must be a non-negative integer")
    if args.command == "run" and args.step_delay < 0:
        parser.error("--step-delay must be non-negative")

    try:
        if args.command == "run":
            return _run(args, console)
        if args.command == "compare":
            return _compare(args, console)
    except (SchedulerError, OSError) as exc:
        logger.debug("Run failed", exc_info=True)
        Console(stderr=True).print(f"[red]Error: {escape(str(exc))}[/red]", soft_wrap=True)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
