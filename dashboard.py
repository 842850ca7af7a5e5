"""Web API for the Bellman-Ford arbitrage detector"""
import logging
from datetime import datetime

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from config import CURRENCIES, DEFAULT_SELECTED_CURRENCIES, MIN_SELECTED_CURRENCIES
from engine_bellman_ford import run
from errors import ArbitrageInputError
from src.api.export import router as export_router
from src.api.models import RatesRequest, RunRequest
from src.api.service import http_error, run_service

logger = logging.getLogger(__name__)

app = FastAPI(title="Bellman-Ford Arbitrage Detector", version="1.0.0")
app.include_router(export_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now().isoformat()}


@app.get("/api/currencies")
async def get_currencies():
    """Currencies that can be selected, and the default selection"""
    return {
        "available": CURRENCIES,
        "default": DEFAULT_SELECTED_CURRENCIES,
        "min_selected": MIN_SELECTED_CURRENCIES,
    }


@app.post("/api/rates")
async def get_rates(request: RatesRequest):
    """Generate a fresh simulated rate table for the selected currencies"""
    try:
        rates = await run_service.get_rates(request.currencies)
    except ArbitrageInputError as e:
        raise http_error(e)

    return {
        "currencies": request.currencies,
        "rates": [r.to_dict() for r in rates],
    }


@app.post("/api/run")
async def run_bellman_ford(request: RunRequest):
    """
    Run Bellman-Ford and return the full step trace.

    Uses the supplied rates, or simulated ones when none are given.
    """
    try:
        graph, source = await run_service.prepare(request)
        return run_service.execute(graph, source, request.max_steps)
    except ArbitrageInputError as e:
        raise http_error(e)


@app.get("/api/history")
async def get_history():
    """Recently detected arbitrage cycles"""
    return {"history": [c.to_dict() for c in run_service.history[-20:]]}


@app.websocket("/ws/run")
async def websocket_run(websocket: WebSocket):
    """
    Stream a run one step per message.

    The client sends a RunRequest as JSON; the server answers with one
    step dict per message and closes after the terminal step.
    """
    await websocket.accept()
    try:
        data = await websocket.receive_json()
        try:
            request = RunRequest.model_validate(data)
            graph, source = await run_service.prepare(request)
            steps = run(graph, source)
        except ValidationError as e:
            await websocket.send_json({"error": "invalid request", "detail": e.errors(include_url=False, include_context=False)})
            await websocket.close(code=1008)
            return
        except ArbitrageInputError as e:
            error = http_error(e)
            await websocket.send_json({"error": error.detail, "status_code": error.status_code})
            await websocket.close(code=1008)
            return

        sent = 0
        for step in steps:
            await websocket.send_json(step.to_dict())
            sent += 1

        logger.info(f"Streamed {sent} steps from {source}")
        await websocket.close()
    except WebSocketDisconnect:
        # Client stopped pulling; the rest of the run is never computed
        logger.info("Run stream client disconnected")
