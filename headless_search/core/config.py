"""Configuration from environment variables (.env)."""

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SEARCH_HUB = "NuxtDemo"
DEFAULT_PLATFORM_URL = "https://platform.cloud.coveo.com"
DEFAULT_FIELDS_TO_INCLUDE = (
    "title",
    "description",
    "source",
    "date",
    "author",
    "filetype",
    "permanentid",
)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(v.strip() for v in raw.split(",") if v.strip())


@dataclass(frozen=True)
class Config:
    project_root: Path
    logs_dir: Path
    log_to_file: bool
    organization_id: str
    api_key: str
    platform_url: str
    search_hub: str
    pipeline: str
    page_size: int
    number_of_suggestions: int
    suggestion_debounce_ms: int
    recent_queries_max: int
    request_timeout: float
    fields_to_include: tuple[str, ...]
    analytics_enabled: bool
    origin_context: str

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        logs_dir = os.getenv("SEARCH_LOGS_DIR", "")
        return cls(
            project_root=project_root,
            logs_dir=Path(logs_dir) if logs_dir else project_root / "logs",
            log_to_file=_env_bool("SEARCH_LOG_TO_FILE", True),
            organization_id=os.getenv("SEARCH_ORGANIZATION_ID", "").strip(),
            api_key=os.getenv("SEARCH_API_KEY", "").strip(),
            platform_url=os.getenv("SEARCH_PLATFORM_URL", DEFAULT_PLATFORM_URL).rstrip("/"),
            search_hub=os.getenv("SEARCH_HUB", DEFAULT_SEARCH_HUB),
            pipeline=os.getenv("SEARCH_PIPELINE", ""),
            page_size=int(os.getenv("SEARCH_PAGE_SIZE", "10")),
            number_of_suggestions=int(os.getenv("SEARCH_NUMBER_OF_SUGGESTIONS", "5")),
            suggestion_debounce_ms=int(os.getenv("SEARCH_SUGGESTION_DEBOUNCE_MS", "200")),
            recent_queries_max=int(os.getenv("SEARCH_RECENT_QUERIES_MAX", "10")),
            request_timeout=float(os.getenv("SEARCH_REQUEST_TIMEOUT", "10.0")),
            fields_to_include=_env_list("SEARCH_FIELDS_TO_INCLUDE", DEFAULT_FIELDS_TO_INCLUDE),
            analytics_enabled=_env_bool("SEARCH_ANALYTICS_ENABLED", True),
            origin_context=os.getenv("SEARCH_ORIGIN_CONTEXT", "Search"),
        )

    def replace(self, **changes) -> "Config":
        """Copy with overrides, e.g. a per-engine search hub or pipeline."""
        return replace(self, **changes)

    def validate(self) -> list[str]:
        errors = []
        if not self.organization_id:
            errors.append("SEARCH_ORGANIZATION_ID is not set")
        if not self.api_key:
            errors.append("SEARCH_API_KEY is not set")
        if not self.platform_url:
            errors.append("SEARCH_PLATFORM_URL must not be empty")
        if self.page_size < 1:
            errors.append(f"Page size must be positive, got {self.page_size}")
        if self.number_of_suggestions < 0:
            errors.append(
                f"Number of suggestions must not be negative, got {self.number_of_suggestions}"
            )
        if self.suggestion_debounce_ms < 0:
            errors.append(
                f"Suggestion debounce must not be negative, got {self.suggestion_debounce_ms}"
            )
        if self.recent_queries_max < 0:
            errors.append(
                f"Recent queries limit must not be negative, got {self.recent_queries_max}"
            )
        if self.request_timeout <= 0:
            errors.append(f"Request timeout must be positive, got {self.request_timeout}")
        return errors


config = Config.load()
