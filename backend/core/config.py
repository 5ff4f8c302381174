import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)


def _env_bool(name: str, default: str = "false") -> bool:
    return str(os.getenv(name, default)).strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name) or default)
    except ValueError:
        return default


OPENAI_API_KEY = str(os.getenv("OPENAI_API_KEY") or "").strip()
OPENAI_BASE_URL = str(os.getenv("OPENAI_BASE_URL") or "").strip() or None
ANALYSIS_MODEL = str(os.getenv("ANALYSIS_MODEL") or "gpt-4o-mini").strip()  # json_object capable + cheap
COMPLETION_TIMEOUT_SEC = max(1.0, _env_float("COMPLETION_TIMEOUT_SEC", 30.0))
ANALYSIS_USE_MOCK = _env_bool("ANALYSIS_USE_MOCK")
