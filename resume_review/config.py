import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = [
    "https://klyro-resume.vercel.app",
    "http://localhost:3000",
    "http://localhost:5173",
]


@dataclass
class Settings:
    port: int = 3000
    host: str = "0.0.0.0"
    hf_api_key: Optional[str] = None
    hf_model: str = "mistralai/Mistral-7B-Instruct-v0.3"
    hf_base_url: str = "https://router.huggingface.co/v1"
    llm_provider: str = "huggingface"
    ollama_url: str = "http://localhost:11434/api/generate"
    ollama_model: str = "mistral"
    llm_timeout: float = 60.0
    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    frontend_dir: str = "frontend"
    images_dir: str = "images"
    log_level: str = "INFO"


def _split_origins(value):
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Build settings from the environment, reading a local .env first."""
    load_dotenv()

    cors = os.getenv("CORS_ORIGINS")
    return Settings(
        port=int(os.getenv("PORT", "3000")),
        host=os.getenv("HOST", "0.0.0.0"),
        hf_api_key=os.getenv("HF_API_KEY") or None,
        hf_model=os.getenv("HF_MODEL", Settings.hf_model),
        hf_base_url=os.getenv("HF_BASE_URL", Settings.hf_base_url),
        llm_provider=os.getenv("LLM_PROVIDER", "huggingface").lower(),
        ollama_url=os.getenv("OLLAMA_URL", Settings.ollama_url),
        ollama_model=os.getenv("OLLAMA_MODEL", Settings.ollama_model),
        llm_timeout=float(os.getenv("LLM_TIMEOUT", "60")),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        max_upload_bytes=int(float(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024),
        cors_origins=_split_origins(cors) if cors else list(DEFAULT_CORS_ORIGINS),
        frontend_dir=os.getenv("FRONTEND_DIR", "frontend"),
        images_dir=os.getenv("IMAGES_DIR", "images"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
