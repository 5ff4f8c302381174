from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from app.api.analysis import router as analysis_router
from core import config

logging.basicConfig(
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
)

app = FastAPI(title="Code Assessment Analysis")
logger = logging.getLogger("app.main")


def _get_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    return [item.strip() for item in raw.split(",") if item.strip()]


_allowed_origins = _get_allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)


@app.on_event("startup")
async def startup_banner():
    logger.info("[SYSTEM] CORS allow_origins=%s", _allowed_origins)
    logger.info(
        "[SYSTEM] analysis model=%s timeout_sec=%s mock=%s credential=%s",
        config.ANALYSIS_MODEL,
        config.COMPLETION_TIMEOUT_SEC,
        config.ANALYSIS_USE_MOCK,
        "set" if config.OPENAI_API_KEY else "missing",
    )


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "service": "analysis"}


app.include_router(analysis_router)
