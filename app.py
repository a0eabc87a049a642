import os, json, logging
import requests
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

# Load env vars
load_dotenv()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "60"))

logger = logging.getLogger(__name__)

if not GEMINI_API_KEY:
    logger.warning("Set GEMINI_API_KEY in .env")

app = FastAPI(title="BuildBoard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: restrict to the extension origin once it is published
    allow_methods=["*"],
    allow_headers=["*"],
)


class GenerateRequest(BaseModel):
    prompt: str | None = None


def gemini_url(model: str, api_key: str) -> str:
    return f"{GEMINI_API_BASE}/models/{model}:generateContent?key={api_key}"


def response_text(data) -> str:
    """First candidate text, or the whole response serialized when it is absent."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None
    return text or json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def gemini_generate(prompt: str, api_key: str, model: str = GEMINI_MODEL) -> str:
    """Send one prompt to the Generative Language API and return the model text."""
    body = {"contents": [{"parts": [{"text": prompt}]}]}
    r = requests.post(gemini_url(model, api_key), json=body, timeout=UPSTREAM_TIMEOUT)
    return response_text(r.json())


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/generate")
async def generate(request: Request):
    try:
        payload = await request.json()
        req = GenerateRequest(**payload)
    except (ValueError, TypeError, ValidationError):
        req = GenerateRequest()
    if not req.prompt:
        return JSONResponse(status_code=400, content={"error": "missing prompt"})

    if not GEMINI_API_KEY:
        logger.warning("Set GEMINI_API_KEY in .env")
        return JSONResponse(status_code=400, content={"message": "Gemini API Missing"})

    try:
        text = await run_in_threadpool(gemini_generate, req.prompt, GEMINI_API_KEY)
    except Exception as e:
        logger.exception("Error in /generate")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return {"text": text}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
