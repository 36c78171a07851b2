# app/main.py
from __future__ import annotations
import logging
from fastapi import Depends, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from app.deps import activity_store
from facade.activity_store_facade import ActivityStoreFacade


logger = logging.getLogger("uvicorn.error")
JSON_MEDIA_TYPE = "application/json; charset=utf-8"


# ---------------------------
# App init
# ---------------------------
app = FastAPI(title="GameActivity — Session Sync API")


@app.on_event("startup")
def on_startup() -> None:
    """Build the store (and create tables) once, before serving requests."""
    activity_store()


@app.get("/", tags=["meta"])
def root():
    return {"ok": True, "service": app.title}


# ---------------------------
# Sync endpoints
# ---------------------------
@app.get("/sessions/export", tags=["sync"])
def export_sessions_endpoint(store: ActivityStoreFacade = Depends(activity_store)) -> Response:
    return Response(content=store.export_sessions_json(), media_type=JSON_MEDIA_TYPE)


@app.post("/sessions/import", tags=["sync"])
async def import_sessions_endpoint(
    request: Request,
    store: ActivityStoreFacade = Depends(activity_store),
) -> Response:
    body = await request.body()
    payload = body.decode("utf-8", errors="replace") if body else None
    logger.info("POST /sessions/import (%d bytes)", len(body))
    # the import blocks on the store lock, keep it off the event loop
    content = await run_in_threadpool(store.import_sessions_json, payload)
    return Response(content=content, media_type=JSON_MEDIA_TYPE)


if __name__ == "__main__":
    # Run with: uvicorn app.main:app --reload
    import uvicorn
    uvicorn.run("app.main:app", host="127.0.0.1", port=8000, reload=True)
