"""Configuration management for sheetrecords."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_scopes() -> list[str]:
    """Parse OAuth scopes from environment variable."""
    scopes_env = os.getenv("GOOGLE_SCOPES")
    if scopes_env:
        return [scope.strip() for scope in scopes_env.split(",") if scope.strip()]
    return ["https://www.googleapis.com/auth/spreadsheets"]


class Settings(BaseModel):
    """Application settings."""

    # Google Sheets API credentials
    google_credentials_path: Path = Path(os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"))
    google_token_path: Path = Path(os.getenv("GOOGLE_TOKEN_PATH", "token.json"))
    google_scopes: list[str] = _parse_scopes()

    # How cell values are sent to and read from the Sheets API
    value_input_option: str = os.getenv("VALUE_INPUT_OPTION", "USER_ENTERED")
    value_render_option: str = os.getenv("VALUE_RENDER_OPTION", "UNFORMATTED_VALUE")

    # Suffix of the sheet that receives rows removed during reconciliation
    archive_sheet_suffix: str = os.getenv("ARCHIVE_SHEET_SUFFIX", "_archive")

    # Row holding column headers when callers don't say otherwise
    default_header_row: int = int(os.getenv("DEFAULT_HEADER_ROW", "1"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
