"""
Central configuration for the i18n translation tool.

The module-level constants are the defaults shown in --help. At startup
main.py folds them together with the command-line flags into a single
frozen RunConfig, which is the only configuration object passed around.

LANGUAGES is a comma-separated list of target language codes:
    "es,fr,de"      – three target languages
    "es, ,fr"       – blank entries are ignored (es and fr only)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

VERSION = "1.0.0"

# ── Model ──────────────────────────────────────────────────────────────────────
SERVICE = "chatgpt"            # only "chatgpt" is supported for now
MODEL = "gpt-4o-mini"          # change to "gpt-4o", "gpt-4.1-mini", etc.
TEMPERATURE = 0.2              # lower = more consistent/literal translations

# ── Files ──────────────────────────────────────────────────────────────────────
# Only files whose name ends in this extension are translated (case-sensitive).
JSON_EXTENSION = ".json"

# ── Languages ──────────────────────────────────────────────────────────────────
SOURCE_LANG = "en"
LANGUAGES = "es,fr,de"

# ── Processing ─────────────────────────────────────────────────────────────────
# Number of parallel workers. Every worker handles one file at a time.
CONCURRENCY = 4

# Attempts per model call for transient errors (connection, rate limit, 5xx).
# Set to 1 to disable retrying.
MAX_ATTEMPTS = 3

# ── Paths ──────────────────────────────────────────────────────────────────────
SOURCE_DIR = "./locales/en"
TARGET_DIR = "./locales"


@dataclass(frozen=True)
class RunConfig:
    """Everything a single run needs, resolved once from defaults and flags."""

    source: Path
    target: Path
    source_lang: str
    languages: str
    api_key: str
    service: str = SERVICE
    model: str = MODEL
    temperature: float = TEMPERATURE
    concurrency: int = CONCURRENCY
    max_attempts: int = MAX_ATTEMPTS
    progress: bool = True
