"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import os

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class LLMConfig(BaseSettings):
    assistant_model: str = "gpt-4o-mini"
    vision_model: str = "gpt-4o"
    analysis_model: str = "gpt-4o"
    anthropic_model: str = "claude-sonnet-4-20250514"
    assistant_temperature: float = 0.7
    assistant_max_tokens: int = 800
    image_temperature: float = 0.3
    image_max_tokens: int = 1000
    predictive_temperature: float = 0.3
    predictive_max_tokens: int = 1500


class PhotoStoreConfig(BaseSettings):
    base_dir: str = "data/photos"
    thumbnail_size: tuple[int, int] = (320, 240)
    max_upload_bytes: int = 10 * 1024 * 1024


class WorkflowConfig(BaseSettings):
    work_order_number_prefix: str = "WO"
    predictive_history_limit: int = 20
    high_confidence_min_work_orders: int = 10
    quote_number_prefix: str = "Q"
    quote_tax_rate: float = 8.0
    quote_valid_days: int = 30
    labor_rate: float = 95.0


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/repairflow.db"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    resend_api_key: str = ""
    app_url: str = "http://localhost:8000"
    log_level: str = "INFO"
    llm: LLMConfig = Field(default_factory=LLMConfig)
    photo_store: PhotoStoreConfig = Field(default_factory=PhotoStoreConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _yaml
    llm = LLMConfig(**y.get("llm", {}))
    photos = PhotoStoreConfig(**y.get("photo_store", {}))
    wf = WorkflowConfig(**y.get("workflow", {}))
    overrides = {}
    db_url = y.get("database", {}).get("url")
    if db_url and "DATABASE_URL" not in os.environ:
        overrides["database_url"] = db_url
    log_level = y.get("logging", {}).get("level")
    if log_level and "LOG_LEVEL" not in os.environ:
        overrides["log_level"] = log_level
    return Settings(
        llm=llm,
        photo_store=photos,
        workflow=wf,
        **overrides,
    )
