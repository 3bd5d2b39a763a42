# routes/data_api.py

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from server_log.logger_singleton import getLogger
from storage import PayloadError, StorageError, generate_filename, is_valid_name, save_payload, serialize_payload

logger = getLogger()

router = APIRouter(tags=["data-ingest"])

HOME_MESSAGE = "this is a home page of data backs. pass data to /data/:name with JSON body to save it"


def get_client_address(request: Request) -> str:
    """Peer host as reported by the ASGI server."""
    if request.client is None:
        return "unknown"
    return request.client.host


def get_forwarded_for(request: Request) -> str:
    return request.headers.get("x-forwarded-for", "none")


@router.get("/", response_class=PlainTextResponse)
def home():
    return HOME_MESSAGE


@router.post("/data/{name}")
def save_data(
    name: str,
    request: Request,
    payload: Any = Body(...),
    client_address: str = Depends(get_client_address),
    forwarded_for: str = Depends(get_forwarded_for),
):
    """
    Save the JSON body to <data_dir>/<name>-<date>-<address>.json.
    Runs in the threadpool, so the blocking file write is fine here.
    """
    try:
        data = serialize_payload(payload)
    except PayloadError as e:
        logger.warning(f"[DataAPI] Rejected payload for {name}: {e}")
        raise HTTPException(status_code=422, detail="Payload cannot be stored as JSON")

    logger.logMessage(
        f"[DataAPI] Data received for {client_address} (forwarded for {forwarded_for}) {name}: {len(data)}"
    )

    if not is_valid_name(name):
        return PlainTextResponse("Invalid name", status_code=400)

    config = request.app.state.config
    clock = request.app.state.clock
    filename = generate_filename(name, client_address, clock())

    try:
        dest = save_payload(config.data_dir, filename, data)
    except StorageError as e:
        logger.error(f"[DataAPI] {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save data")

    logger.logMessage(f"[DataAPI] Data saved to {dest}")
    return {"filename": filename}
