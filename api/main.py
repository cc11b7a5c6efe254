from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, StrictInt
from anyio import to_thread
from lamport_clock import EventLogger, LogicalClock
import logging
import time

logger = logging.getLogger(__name__)

app = FastAPI(title="Lamport clock service")


class ReceivedEvent(BaseModel):
    timestamp: StrictInt


@app.on_event("startup")
async def startup_event() -> None:
    """Create the clock and its event log when the API starts."""
    app.state.started_at = time.time()
    app.state.clock = LogicalClock()
    app.state.events = EventLogger(
        getattr(app.state, "event_log_path", None),
        max_events=getattr(app.state, "max_events", 1000),
    )
    threads = getattr(app.state, "worker_threads", None)
    if threads:
        # sync handlers run on anyio's default thread pool
        to_thread.current_default_thread_limiter().total_tokens = threads
    logger.info("Lamport clock service started (threads=%s)", threads or "default")


@app.on_event("shutdown")
def shutdown_event() -> None:
    """Close the event log when the API stops."""
    events = getattr(app.state, "events", None)
    if events is not None:
        events.close()
    logger.info("Lamport clock service stopped")


@app.exception_handler(RequestValidationError)
async def malformed_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed requests with 400 before the clock is touched."""
    errors = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    ]
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"detail": errors})


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "FastAPI server with Lamport Clock is running!"


@app.get("/time")
def local_time() -> dict:
    """Record a local event and return the new logical time."""
    logical_time = app.state.clock.tick()
    app.state.events.log(f"tick -> {logical_time}")
    logger.debug("Local event at logical time %d", logical_time)
    return {"logical_time": logical_time, "message": "Local event occurred"}


@app.get("/send")
def send_time() -> dict:
    """Advance the clock and return the timestamp to attach to an outgoing message."""
    logical_time = app.state.clock.tick()
    app.state.events.log(f"send -> {logical_time}")
    logger.debug("Send event at logical time %d", logical_time)
    return {
        "logical_time": logical_time,
        "message": "Use this timestamp when sending to another node",
    }


@app.post("/receive")
def receive_event(event: ReceivedEvent) -> dict:
    """Merge the timestamp carried by a received message."""
    updated = app.state.clock.merge(event.timestamp)
    app.state.events.log(f"receive {event.timestamp} -> {updated}")
    logger.debug("Received timestamp %d, clock now %d", event.timestamp, updated)
    return {
        "received_timestamp": event.timestamp,
        "updated_logical_time": updated,
        "message": "Clock synchronized with received event",
    }


@app.get("/health")
def health() -> dict:
    """Report liveness and the current logical time without advancing it."""
    return {
        "status": "ok",
        "logical_time": app.state.clock.get(),
        "uptime": time.time() - app.state.started_at,
    }


@app.get("/events")
def clock_events(offset: int = 0, limit: int | None = Query(None, ge=0)) -> dict:
    """Return recent clock events.

    Entries are appended after the clock operation completes, so under
    concurrent requests their order may differ from logical-time order.
    Each entry carries its logical time.
    """
    return {"events": app.state.events.get_events(offset, limit)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host="0.0.0.0", port=8080, reload=False)
