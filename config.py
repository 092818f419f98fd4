import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# AI providers. A provider whose key is unset is left out of the chain.
HUGGINGFACE_API_KEY = os.getenv("HUGGINGFACE_API_KEY", "")
HUGGINGFACE_MODELS = _csv(os.getenv("HUGGINGFACE_MODELS", "google/flan-t5-large,gpt2,distilgpt2"))
HUGGINGFACE_API_URL = os.getenv("HUGGINGFACE_API_URL", "https://router.huggingface.co/hf-inference/models")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

AI_PROVIDER_ORDER = _csv(os.getenv("AI_PROVIDER_ORDER", "huggingface,gemini,openai"))
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "10"))

# External lookups
WIKIPEDIA_API_URL = os.getenv("WIKIPEDIA_API_URL", "https://en.wikipedia.org/w/api.php")
WIKIPEDIA_SUMMARY_URL = os.getenv("WIKIPEDIA_SUMMARY_URL", "https://en.wikipedia.org/api/rest_v1/page/summary/")
WIKIPEDIA_TIMEOUT_SECONDS = float(os.getenv("WIKIPEDIA_TIMEOUT_SECONDS", "10"))
MATHJS_API_URL = os.getenv("MATHJS_API_URL", "https://api.mathjs.org/v4/")

# History
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./study_history.db")
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
