import os

from dotenv import load_dotenv

load_dotenv()  # load environment variables from .env file


def _float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    return float(value)


def _int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


CONFIG = {
    "openai_api_key": os.getenv("OPENAI_API_KEY", ""),
    "llm_model": os.getenv("LLM_MODEL", "gpt-4o"),
    "llm_temperature": _float(os.getenv("LLM_TEMPERATURE"), 0.0),
    "llm_max_retries": _int(os.getenv("LLM_MAX_RETRIES"), 2),
    "llm_timeout": _float(os.getenv("LLM_TIMEOUT"), 60.0),
    "log_level": os.getenv("LOG_LEVEL", "info"),
}
