"""
Data export endpoints (CSV, JSON).
"""

import csv
import io
import json
from datetime import datetime
from typing import List
from fastapi import APIRouter, Query, Response

from errors import ArbitrageInputError
from src.core.opportunity import ArbitrageCycle

from .models import RunRequest
from .service import http_error, run_service

router = APIRouter(prefix="/api/export", tags=["Export"])

TRACE_CSV_HEADERS = [
    "index",
    "type",
    "iteration",
    "from_node",
    "to_node",
    "rate",
    "old_distance",
    "new_distance",
    "relaxed",
    "message",
]


def generate_csv(headers: List[str], rows: List[List[str]]) -> str:
    """Generate CSV string from headers and rows"""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    writer.writerows(rows)
    return output.getvalue()


def _cell(value) -> str:
    return "" if value is None else str(value)


def _attachment(content: str, media_type: str, prefix: str, extension: str) -> Response:
    filename = f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{extension}"
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
        },
    )


async def _run_trace(request: RunRequest) -> dict:
    try:
        graph, source = await run_service.prepare(request)
        return run_service.execute(graph, source, request.max_steps)
    except ArbitrageInputError as e:
        raise http_error(e)


@router.post("/trace/csv")
async def export_trace_csv(request: RunRequest):
    """
    Run Bellman-Ford and export its step trace to CSV.

    One row per step; distance snapshots are left out, use the JSON
    export for those.
    """
    result = await _run_trace(request)

    rows = []
    for step in result["steps"]:
        edge = step["edge"]
        rows.append([
            _cell(step["index"]),
            step["type"],
            _cell(step["iteration"]),
            _cell(step["from_node"]),
            _cell(step["to_node"]),
            f"{edge['rate']:.8f}" if edge else "",
            _cell(step["old_distance"]),
            _cell(step["new_distance"]),
            _cell(step["relaxed"]),
            step["message"],
        ])

    return _attachment(generate_csv(TRACE_CSV_HEADERS, rows), "text/csv", "trace", "csv")


@router.post("/trace/json")
async def export_trace_json(request: RunRequest):
    """Run Bellman-Ford and export the full trace, graph included, as JSON"""
    result = await _run_trace(request)
    return _attachment(json.dumps(result, ensure_ascii=False, indent=2), "application/json", "trace", "json")


@router.get("/arbitrage/csv")
async def export_arbitrage_csv(
    min_profit: float = Query(default=0.0, ge=0, description="Minimum profit percentage"),
):
    """Export recently detected arbitrage cycles to CSV"""
    cycles = [c for c in run_service.history if c.profit_percent >= min_profit]
    rows = [c.to_csv_row() for c in cycles]

    return _attachment(generate_csv(ArbitrageCycle.csv_headers(), rows), "text/csv", "arbitrage", "csv")
