"""
Pre-authored study content for well-known topics.

The table lives in data/mock_topics.json. Topics outside it get a generic,
explicitly low-quality template filled in with the topic name.
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

from models import GeneratedContent, Mode

logger = logging.getLogger(__name__)

DATA_PATH = Path(__file__).resolve().parent / "data" / "mock_topics.json"


def _fill(value: Any, topic: str) -> Any:
    if isinstance(value, str):
        return value.replace("{topic}", topic)
    if isinstance(value, list):
        return [_fill(v, topic) for v in value]
    if isinstance(value, dict):
        return {k: _fill(v, topic) for k, v in value.items()}
    return value


class MockLibrary:
    def __init__(self, path: Path = DATA_PATH) -> None:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        self.topics: Dict[str, Dict[str, Any]] = data["topics"]
        self.aliases: Dict[str, str] = data.get("aliases", {})
        self.generic: Dict[str, Any] = data["generic"]

    def match(self, topic: str) -> Optional[str]:
        key = (topic or "").lower().strip()
        if not key:
            return None
        if key in self.topics:
            return key
        for name in self.topics:
            if name in key or key in name:
                return name
        for alias, name in self.aliases.items():
            if re.search(rf"\b{re.escape(alias)}\b", key):
                return name
        return None

    def lookup(self, topic: str, mode: Mode) -> GeneratedContent:
        name = self.match(topic)
        if name is not None:
            logger.info("Using topic-specific mock content for %r (%s mode)", name, mode.value)
            return GeneratedContent.model_validate(self.topics[name][mode.value])
        logger.info("Using generic template content for %r (%s mode)", topic, mode.value)
        return GeneratedContent.model_validate(_fill(self.generic[mode.value], topic.strip()))
