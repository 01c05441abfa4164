#!/usr/bin/env python3
"""
Estiba wages CLI: parse shifts copied from the port employment portal (TXT or PDF)
and print base, gross and net pay per shift.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from estiba_wages.config import Settings, configure_logging
from estiba_wages.records import GROUPS
from estiba_wages.run import RunResult, process_text, run


def main(argv: Optional[List[str]] = None) -> int:
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Estiba wages: calculate gross and net pay from portal shift listings.",
    )
    parser.add_argument(
        "input",
        help="Portal text (TXT or PDF), or - to read pasted text from stdin",
    )
    parser.add_argument(
        "--group",
        choices=GROUPS,
        default=settings.default_group,
        help=f"Professional group when the line does not force one (default: {settings.default_group})",
    )
    parser.add_argument(
        "--irpf",
        type=float,
        default=settings.irpf_percent,
        help=f"IRPF withholding percentage (default: {settings.irpf_percent})",
    )
    parser.add_argument(
        "--salary-table",
        type=Path,
        default=settings.salary_table_path,
        help="Salary table overrides (CSV or Excel): group, day_type, shift, amount",
    )
    parser.add_argument(
        "--festive-rates",
        type=Path,
        default=settings.festive_rates_path,
        help="Overnight holiday rates (CSV or Excel): group, FESTIVO_TO_FESTIVO|FESTIVO_TO_LABORABLE, 20-02, amount",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Output directory for entries.csv (file input only)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Log level (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.input == "-":
            result: RunResult = process_text(
                sys.stdin.read(),
                group=args.group,
                irpf_percent=args.irpf,
                salary_table_path=args.salary_table,
                festive_rates_path=args.festive_rates,
            )
        else:
            input_path = Path(args.input)
            if not input_path.exists():
                print(f"Error: input file not found: {input_path}", file=sys.stderr)
                return 1
            result = run(
                input_path=input_path,
                group=args.group,
                irpf_percent=args.irpf,
                salary_table_path=args.salary_table,
                festive_rates_path=args.festive_rates,
                out_dir=args.out_dir,
            )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Run summary (printed every run)
    print(result.summary_text)
    print()

    if result.entries_output_text:
        print("--- SHIFTS ---")
        print(result.entries_output_text)
    else:
        print("--- SHIFTS: none ---")

    if result.entries_csv_path:
        print()
        print(f"Entries CSV: {result.entries_csv_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
