"""Command-line interface for FSM transition table creation."""

import argparse
import logging
import sys

from .analysis import find_overlapping_transitions, find_unsatisfiable_guards
from .loader import load_fsm
from .transition_table import create_transition_table

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Create the transition table of a finite state machine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fsm-table machine.json                  Print the transition table
  fsm-table machine.json -f columns       One "name: 10-.." line per result
  fsm-table machine.json --check          Report overlapping and dead guards
        """,
    )

    parser.add_argument("fsm", help="FSM description (JSON)")
    parser.add_argument(
        "--format", "-f",
        choices=["table", "columns"],
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Analyze guards for overlaps and unsatisfiable conditions first",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        fsm = load_fsm(args.fsm)

        if args.check:
            overlaps = find_overlapping_transitions(fsm)
            dead = find_unsatisfiable_guards(fsm)
            for overlap in overlaps:
                print(f"Overlap: {overlap}")
            for t in dead:
                print(f"Never fires: {t}")
            if overlaps:
                return 2
            if not dead:
                print("No overlapping transitions found")

        table = create_transition_table(fsm)

        if args.format == "columns":
            width = max((len(r) for r in table.results), default=0)
            for name in table.results:
                print(f"{name:>{width}}: {table.column_string(name)}")
        else:
            print(table.format_table())

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
