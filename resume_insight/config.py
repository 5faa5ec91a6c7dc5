"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env

# API keys – never hardcode
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# LLM request settings
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))
TEMPERATURE: float = 0.1
TOP_P: float = 0.9

# Text sent to the model is truncated beyond this many characters
MAX_DOCUMENT_CHARS: int = 50000

# Concurrency
ARCHIVE_CONCURRENCY: int = 8  # Max ZIP members decompressed at once

# Placeholder for work experience fields the model could not find
NOT_SPECIFIED: str = "N/A"

# Declared upload content types -> input kind (see schemas.document.InputKind)
ACCEPTED_CONTENT_TYPES: dict = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/zip": "zip",
    "application/x-zip-compressed": "zip",
}
