from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHM_NAMES, ALGORITHMS, DEFAULT_QUANTUM, run_simulation
from .errors import SchedulerError
from .export import EXPORT_FORMATS, write_export
from .gantt import build_rich_gantt, playback_frames, process_labels
from .models import Process, SchedulingResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, Round Robin, SRTF).",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    _add_algorithm_args(run_parser)
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Play the computed schedule back one time unit at a time.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=_non_negative_float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: all).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for round-robin when included (default: {DEFAULT_QUANTUM}).",
    )

    export_parser = subparsers.add_parser("export", help="Run an algorithm and write the result to a file.")
    _add_algorithm_args(export_parser)
    export_parser.add_argument(
        "--output",
        "-o",
        required=True,
        help="Destination file.",
    )
    export_parser.add_argument(
        "--format",
        "-f",
        choices=EXPORT_FORMATS,
        default="csv",
        help="Export format (default: csv).",
    )

    return parser


def _add_algorithm_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}; ignored by other algorithms).",
    )


def _non_negative_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0 (got {value})")
    return number


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def _print_result(result: SchedulingResult, processes: Sequence[Process], console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {ALGORITHM_NAMES[result.algorithm]}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.schedule, process_labels(processes))
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["PID", "Name", "Arrive", "Burst", "Priority", "Wait", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Name", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    m = result.metrics
    for p in processes:
        proc_table.add_row(
            str(p.pid),
            escape(p.label),
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(m.waiting_times[p.pid]),
            str(m.turnaround_times[p.pid]),
            str(m.response_times[p.pid]),
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{m.average_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{m.average_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{m.average_response_time:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{m.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{m.cpu_utilization*100:.1f}%")
    sys_table.add_row("Makespan", str(m.makespan))

    console.print(sys_table)


def _animate_result(result: SchedulingResult, processes: Sequence[Process], delay: float, console: Console) -> None:
    """
    Time-stepped playback of the computed schedule.
    """
    frames = playback_frames(result.schedule, processes, result.algorithm, result.quantum)
    if not frames:
        console.print("[red]No execution to animate.[/red]")
        return

    console.print(f"[bold]Simulating {ALGORITHM_NAMES[result.algorithm]}[/bold] (duration {len(frames)} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    labels = process_labels(processes)
    for frame in frames:
        bar = f" [green]{'█' * frame.progress}[/green]" if frame.progress else ""
        console.print(f"t={frame.time:2d}: {escape(frame.label)}{bar}")
        ready = ", ".join(labels[pid] for pid in frame.ready) or "-"
        remaining = " ".join(f"{labels[pid]}={left}" for pid, left in frame.remaining.items())
        console.print(f"      [dim]ready: {escape(ready)} | remaining: {escape(remaining)}[/dim]")
        console.print(f"      [dim]{escape(frame.explanation)}[/dim]")
        time.sleep(delay)


def _compare(processes: List[Process], algorithms: Sequence[str], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util.", justify="right")

    for alg in algorithms:
        result = run_simulation(alg, processes, quantum=quantum)
        m = result.metrics
        summary_table.add_row(
            alg,
            "" if result.quantum is None else str(result.quantum),
            f"{m.average_waiting_time:.2f}",
            f"{m.average_turnaround_time:.2f}",
            f"{m.average_response_time:.2f}",
            f"{m.cpu_utilization*100:.1f}%",
        )

    console.print(summary_table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = Console()

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "run":
            result = run_simulation(args.algorithm, processes, quantum=args.quantum)
            if args.step:
                try:
                    _animate_result(result, processes, args.step_delay, console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, processes, console)
            return 0

        if args.command == "compare":
            _compare(processes, args.algorithms, args.quantum, console)
            return 0

        if args.command == "export":
            result = run_simulation(args.algorithm, processes, quantum=args.quantum)
            out = write_export(result, args.output, fmt=args.format, processes=processes)
            logger.info("Wrote %s export to %s", args.format, out)
            console.print(f"Wrote {args.format} export to [green]{escape(str(out))}[/green]")
            return 0
    except SchedulerError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
