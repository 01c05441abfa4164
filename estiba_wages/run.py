"""
Orchestrate: load portal text, segment into records, calculate wages, write outputs.
"""
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger

from .outputs import format_entries_output, format_run_summary, write_entries_csv
from .parser import load_text, segment_text
from .records import CompletedShiftEntry
from .salary_table import load_festive_night_rates, load_salary_table
from .wages import Totals, calculate_records, summarize_entries


@dataclass
class RunResult:
    entries: List[CompletedShiftEntry]
    totals: Totals
    dialect: Optional[str]
    detected: int
    entries_output_text: str
    summary_text: str
    entries_csv_path: Optional[Path] = None


def process_text(
    text: str,
    group: str,
    irpf_percent: Any,
    salary_table_path: Optional[Path] = None,
    festive_rates_path: Optional[Path] = None,
    today: Optional[date] = None,
) -> RunResult:
    """Parse pasted text and calculate every complete record."""
    table = load_salary_table(salary_table_path)
    festive_rates = load_festive_night_rates(festive_rates_path, table)

    segmentation = segment_text(text, group, today)
    entries = calculate_records(segmentation.records, irpf_percent, table, festive_rates)
    totals = summarize_entries(entries)
    detected = len(segmentation.records)
    if detected > totals.count:
        logger.info("{} record(s) missing date, group or shift were skipped", detected - totals.count)

    return RunResult(
        entries=entries,
        totals=totals,
        dialect=segmentation.dialect,
        detected=detected,
        entries_output_text=format_entries_output(entries),
        summary_text=format_run_summary(detected, totals, segmentation.dialect),
    )


def run(
    input_path: Path,
    group: str,
    irpf_percent: Any,
    salary_table_path: Optional[Path] = None,
    festive_rates_path: Optional[Path] = None,
    out_dir: Optional[Path] = None,
    today: Optional[date] = None,
) -> RunResult:
    """
    Load portal text (TXT or PDF), calculate entries. Write entries.csv to out_dir if set.
    """
    text = load_text(input_path)
    logger.info("loaded {} ({} chars)", input_path, len(text))
    result = process_text(text, group, irpf_percent, salary_table_path, festive_rates_path, today)

    if out_dir:
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        result.entries_csv_path = out_dir / "entries.csv"
        write_entries_csv(result.entries_csv_path, result.entries)
    return result
