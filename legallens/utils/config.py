from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

@dataclass(frozen=True)
class AppConfig:
    use_gemini: bool = True
    gemini_model: str = "gemini-1.5-flash"
    max_tokens: int = 1024
    temperature: float = 0.3
    request_timeout: float = 30.0
    llm_max_retries: int = 1
    max_upload_mb: int = 10
    splitter_strategy: str = "paragraph"
    max_workers: int = 5
    classify_batch_size: int = 1
    chat_history_limit: int = 10
    log_level: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "AppConfig":
        load_dotenv()
        return cls(
            use_gemini=os.getenv("USE_GEMINI", "true").lower() == "true",
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
            max_tokens=int(os.getenv("MAX_TOKENS", "1024")),
            temperature=float(os.getenv("TEMPERATURE", "0.3")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            llm_max_retries=max(1, int(os.getenv("LLM_MAX_RETRIES", "1"))),
            max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "10")),
            splitter_strategy=os.getenv("SPLITTER_STRATEGY", "paragraph").lower(),
            max_workers=max(1, int(os.getenv("MAX_WORKERS", "5"))),
            classify_batch_size=max(1, int(os.getenv("CLASSIFY_BATCH_SIZE", "1"))),
            chat_history_limit=int(os.getenv("CHAT_HISTORY_LIMIT", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
