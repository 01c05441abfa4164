"""
FastAPI backend for the estiba wages web app.
"""
from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from estiba_wages.api_data import build_api_response, entry_to_dict, record_from_dict, totals_to_dict
from estiba_wages.config import Settings
from estiba_wages.parser import load_text, segment_text
from estiba_wages.records import GROUPS
from estiba_wages.salary_table import load_festive_night_rates, load_salary_table
from estiba_wages.wages import calculate_records, summarize_entries

settings = Settings()

app = FastAPI(title="Estiba Wages", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ParseRequest(BaseModel):
    text: str
    group: Optional[str] = None
    irpf: Optional[float] = None
    today: Optional[date] = None


class RecalculateRequest(BaseModel):
    entries: List[Dict[str, Any]] = Field(default_factory=list)
    irpf: float


def _group_or_default(group: Optional[str]) -> str:
    g = (group or settings.default_group).strip().upper()
    if g not in GROUPS:
        raise HTTPException(400, f"Unknown professional group: {group}")
    return g


def _irpf_or_default(irpf: Optional[float]) -> float:
    return settings.irpf_percent if irpf is None else irpf


def _calculate(text: str, group: str, irpf: float, table, festive_rates, today: Optional[date] = None):
    segmentation = segment_text(text, group, today)
    entries = calculate_records(segmentation.records, irpf, table, festive_rates)
    return build_api_response(
        entries,
        summarize_entries(entries),
        detected=len(segmentation.records),
        dialect=segmentation.dialect,
        today=today,
    )


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.post("/api/parse")
def parse_text(req: ParseRequest):
    """Pasted portal text -> calculated shifts."""
    table = load_salary_table(settings.salary_table_path)
    festive_rates = load_festive_night_rates(settings.festive_rates_path, table)
    return _calculate(
        req.text,
        _group_or_default(req.group),
        _irpf_or_default(req.irpf),
        table,
        festive_rates,
        req.today,
    )


async def _save_upload(upload: UploadFile, tmp: str, default_name: str) -> Path:
    path = Path(tmp) / Path(upload.filename or default_name).name
    with open(path, "wb") as f:
        f.write(await upload.read())
    return path


@app.post("/api/process")
async def process_file(
    portal_file: UploadFile = File(...),
    group: str = Form(default=""),
    irpf: Optional[float] = Form(default=None),
    salary_table_file: UploadFile | None = File(default=None),
    festive_rates_file: UploadFile | None = File(default=None),
):
    """Upload portal text (TXT or PDF) + optional salary table / overnight holiday rates."""
    suffix = Path(portal_file.filename or "").suffix.lower()
    if suffix not in (".pdf", ".txt"):
        raise HTTPException(400, "Portal file must be PDF or TXT")
    for upload in (salary_table_file, festive_rates_file):
        if upload and upload.filename and Path(upload.filename).suffix.lower() not in (".csv", ".xlsx"):
            raise HTTPException(400, "Rate tables must be CSV or Excel")
    group_value = _group_or_default(group or None)

    with tempfile.TemporaryDirectory() as tmp:
        portal_path = await _save_upload(portal_file, tmp, "portal.txt")
        text = load_text(portal_path)

        table_path = settings.salary_table_path
        if salary_table_file and salary_table_file.filename:
            table_path = await _save_upload(salary_table_file, tmp, "salary_table.csv")
        table = load_salary_table(table_path)

        rates_path = settings.festive_rates_path
        if festive_rates_file and festive_rates_file.filename:
            rates_path = await _save_upload(festive_rates_file, tmp, "festive_rates.csv")
        festive_rates = load_festive_night_rates(rates_path, table)

        return _calculate(text, group_value, _irpf_or_default(irpf), table, festive_rates)


@app.post("/api/recalculate")
def recalculate(req: RecalculateRequest):
    """Re-apply a withholding rate to stored entries (each rebuilt from its source fields)."""
    table = load_salary_table(settings.salary_table_path)
    festive_rates = load_festive_night_rates(settings.festive_rates_path, table)
    try:
        records = [record_from_dict(e) for e in req.entries]
    except ValueError as e:
        raise HTTPException(400, f"Invalid entry: {e}")
    entries = calculate_records(records, req.irpf, table, festive_rates)
    return {
        "entries": [entry_to_dict(e) for e in entries],
        "totals": totals_to_dict(summarize_entries(entries)),
        "skipped": len(records) - len(entries),
    }
