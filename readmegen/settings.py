"""
Centralised application settings loaded from environment variables.
Uses pydantic-settings so every value can be overridden via env vars or a .env file.

A single ``Settings`` instance is built at startup and handed to the relay and
the clients explicitly; nothing mutates it afterwards.
"""

from pydantic_settings import BaseSettings

from readmegen.errors import ConfigurationError

ALLOWED_EXTENSIONS = (
    ".js", ".jsx", ".ts", ".tsx", ".py", ".json", ".md",
    ".txt", ".yml", ".yaml", ".toml", ".cfg", ".ini",
)


class Settings(BaseSettings):
    """Application configuration."""

    # ── Completion provider (Groq, OpenAI-compatible) ───────
    groq_api_key: str = ""
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model: str = "llama-3.3-70b-versatile"
    llm_temperature: float = 0.5
    llm_timeout_seconds: float | None = None

    # ── Relay server ────────────────────────────────────────
    cors_origin: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "info"

    # ── Client ──────────────────────────────────────────────
    relay_url: str = "http://localhost:3001"
    github_api_base: str = "https://api.github.com"
    github_token: str | None = None
    http_connect_timeout: float = 5.0
    http_read_timeout: float = 10.0

    # ── Upload limits ───────────────────────────────────────
    max_file_bytes: int = 5 * 1024 * 1024
    allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS

    model_config = {
        "env_prefix": "",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def require_api_key(self) -> str:
        """Return the provider credential or fail loudly when it is missing."""
        if not self.groq_api_key.strip():
            raise ConfigurationError(
                "GROQ_API_KEY is not set. Export it or add it to .env "
                "before starting the relay."
            )
        return self.groq_api_key
