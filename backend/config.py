from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


def _env(*names: str, default: Optional[str] = None) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return default


class Settings:
    """Centralized configuration for the Nutri-Web backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent

        # ---- Spreadsheet storage ----
        self.sheets_backend: str = (_env("NUTRI_SHEETS_BACKEND", default="google") or "google").strip().lower()
        self.spreadsheet_id: Optional[str] = _env("NUTRI_SPREADSHEET_ID", "GOOGLE_SHEET_ID")
        self.service_account_file: Path = Path(
            _env(
                "NUTRI_SERVICE_ACCOUNT_FILE",
                "GOOGLE_SERVICE_ACCOUNT_FILE",
                default=str(repo_root / "service_account.json"),
            )
        ).expanduser()
        # Inline JSON takes precedence over the file (handy for container secrets).
        self.service_account_json: Optional[str] = _env("NUTRI_SERVICE_ACCOUNT_JSON")
        self.id_strategy: str = (_env("NUTRI_ID_STRATEGY", default="scan") or "scan").strip().lower()
        self.init_sheets: bool = (_env("NUTRI_INIT_SHEETS", default="1") or "").strip() in {"1", "true", "True"}

        # ---- Auth ----
        # In production you MUST set NUTRI_JWT_SECRET. The dev fallback keeps local demos easy.
        self.jwt_secret: str = _env("NUTRI_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(_env("NUTRI_TOKEN_TTL_DAYS") or "7")

        # ---- Logging ----
        self.log_level: str = (_env("NUTRI_LOG_LEVEL", default="INFO") or "INFO").upper()

        cors = _env("NUTRI_CORS_ORIGINS", default="*") or "*"
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
