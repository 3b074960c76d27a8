from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Rate Source Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/source_stub") if os.path.exists("/source_stub") else Path(__file__).resolve().parents[1] / "source_stub"


def _payload(source_id: str):
    json_file = DATA_DIR / f"{source_id}.json"
    if json_file.exists():
        return JSONResponse(content=json.loads(json_file.read_text(encoding="utf-8")))
    html_file = DATA_DIR / f"{source_id}.html"
    if html_file.exists():
        return HTMLResponse(content=html_file.read_text(encoding="utf-8"))
    raise HTTPException(status_code=404, detail="source not found")

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/rates/{source_id}")
def get_rates(source_id: str):
    return _payload(source_id)

@app.post("/rates/{source_id}")
def post_rates(source_id: str):
    return _payload(source_id)
