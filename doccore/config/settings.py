from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    vault_path: Path = Path("vault")
    cabinet_dir: str = "_cabinet"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "doccore"
    db_username: str = "doccore"
    db_password: str = "secret"

    min_pdf_text_length: int = 50
    ocr_max_pages: int = 20
    ocr_render_scale: float = 2.0
    ocr_language: str = "eng"
    tesseract_cmd: str = "tesseract"

    max_text_chars: int = 100_000
