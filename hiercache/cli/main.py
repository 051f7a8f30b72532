from __future__ import annotations
import argparse
from ..config import HierarchyConfig
from ..runtime.simulator import run_workload
from ..trace.patterns import get_workload, WORKLOADS
from ..trace.reader import read_trace
from ..utils.reporting import generate_report


def cmd_run(args):
    """Handles the 'run' command."""
    config = HierarchyConfig.from_args(args)

    print("--- Hierarchy Configuration ---")
    print(config)
    print("-------------------------------")

    # 1. Pick the input: a trace file wins over a built-in workload
    if config.trace_file:
        trace_file = config.trace_file
        phases = [(trace_file, lambda: read_trace(trace_file))]
    else:
        phases = get_workload(config.workload)

    # 2. Run simulation
    results = run_workload(phases, config)

    # 3. Generate all reports
    generate_report(results, config, ascii_chart=args.ascii)

    print(f"[OK] Simulation finished. Reports are in {config.report_dir}")


def cmd_workloads(args):
    """Handles the 'workloads' command."""
    for name, phases in WORKLOADS.items():
        print(f"{name}:")
        for phase_name, _ in phases:
            print(f"  - {phase_name}")


def build_parser():
    p = argparse.ArgumentParser(
        prog="hiercache",
        description="Two-level cache hierarchy simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Run a trace or workload through the hierarchy",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    # Config file
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML config file to override defaults")

    # Input (set default=None to allow override from YAML)
    pr.add_argument("--trace", type=str, default=None, dest="trace_file",
                    help="Path to a text trace ('R <addr>' / 'W <addr>' per line)")
    pr.add_argument("--workload", type=str, default=None, choices=sorted(WORKLOADS),
                    help="Built-in workload to run when no trace is given")
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save simulation reports")
    pr.add_argument("--ascii", action="store_true",
                    help="Print an ASCII hit-rate chart to the console")

    # Geometry
    geo_group = pr.add_argument_group('Geometry Arguments')
    geo_group.add_argument("--l1-blocks", type=int, default=None, dest="l1_num_blocks",
                           help="Number of L1 blocks")
    geo_group.add_argument("--l1-block-size", type=int, default=None, dest="l1_block_size",
                           help="L1 block size in words")
    geo_group.add_argument("--l2-blocks", type=int, default=None, dest="l2_num_blocks",
                           help="Number of L2 blocks")
    geo_group.add_argument("--l2-block-size", type=int, default=None, dest="l2_block_size",
                           help="L2 block size in words")
    geo_group.add_argument("--l2-ways", type=int, default=None, dest="l2_ways",
                           help="L2 associativity")

    pr.set_defaults(func=cmd_run)

    # --- Workloads Command ---
    pw = sub.add_parser("workloads", help="List built-in workloads")
    pw.set_defaults(func=cmd_workloads)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    main()
