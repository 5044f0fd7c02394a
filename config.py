"""fresh-daily configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

# --- Paths ---
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
DB_PATH = Path(os.getenv("FRESHDAILY_DB_PATH", str(DATA_DIR / "fresh_daily.db")))

# --- API ---
API_HOST = os.getenv("FRESHDAILY_HOST", "127.0.0.1")
API_PORT = int(os.getenv("FRESHDAILY_PORT", "8001"))

# --- Articles ---
DEFAULT_READ_TIME = "3 min read"
TAG_FREQUENCY_WINDOW: int = 200  # recent articles scanned for tag counts
CATEGORY_BATCH_SIZE: int = 100
TAG_PAGE_SIZE: int = 40
RELATED_TAG_LIMIT: int = 12
PAGE_SIZE: int = 10

# --- Search ---
SEARCH_RESULT_LIMIT: int = 8
SEARCH_CACHE_SIZE: int = 100
SEARCH_DEBOUNCE_SECONDS: float = 0.3
RECENT_SEARCH_LIMIT: int = 5
TRENDING_TAG_LIMIT: int = 8

# --- Regulation tracker ---
REGULATION_WINDOW_MONTHS: int = 18

# --- Client-local storage keys ---
BOOKMARKS_KEY = "freshdaily-bookmarks"
VOTED_MODEL_KEY_PREFIX = "freshdaily-voted-model-"
RECENT_SEARCHES_KEY = "freshdaily-recent-searches"
SUBSCRIBED_KEY = "freshdaily-subscribed"

# Uppercased as a whole word when formatting tag labels
TAG_ACRONYMS: list[str] = ["gpt", "llm", "ai", "api", "agi", "gpu", "tpu", "llms", "rlhf"]
TAG_LABEL_OVERRIDES: dict[str, str] = {"openai": "OpenAI", "deepmind": "DeepMind"}

# Section slug -> category keywords (substring, case-insensitive)
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "models": ["model", "llm", "benchmark", "research"],
    "agents": ["agent"],
    "industry": ["industry", "healthcare", "finance", "legal"],
    "coding": ["coding", "code"],
    "regulation": ["regulation", "policy"],
    "science": ["science", "quantum", "robotics"],
    "education": ["academy", "education"],
    "video": ["video", "demo"],
}
