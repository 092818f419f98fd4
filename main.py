import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import config
from database import HistoryStore, init_db
from errors import GenerationFailed, InvalidInput, UpstreamUnavailable
from orchestrator import ContentOrchestrator
from pipeline import StudyPipeline
from providers import build_providers
from wikipedia import WikipediaRetriever

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Study Material API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_history_store() -> HistoryStore:
    return HistoryStore()


@lru_cache
def get_pipeline() -> StudyPipeline:
    return StudyPipeline(
        retriever=WikipediaRetriever(),
        orchestrator=ContentOrchestrator(providers=build_providers()),
        history_store=get_history_store(),
    )


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    return (x_user_id or "").strip() or None


def require_user_id(user_id: Optional[str] = Depends(get_user_id)) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return user_id


@app.on_event("startup")
def on_startup():
    init_db()


@app.get("/")
def root():
    """API root endpoint with basic information."""
    return {
        "name": "Study Material API",
        "version": "1.0.0",
        "endpoints": ["/api/study", "/api/history", "/api/history/{id}"],
    }


@app.get("/api/study")
def study(
    topic: Optional[str] = None,
    mode: str = "normal",
    user_id: Optional[str] = Depends(get_user_id),
    pipeline: StudyPipeline = Depends(get_pipeline),
):
    """
    Generate study material for a topic.
    Normal mode returns a quiz; math mode returns a worked math question.
    """
    try:
        result = pipeline.run(topic, mode, user_id=user_id)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except GenerationFailed as e:
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_payload()


@app.get("/api/history")
def history(
    user_id: str = Depends(require_user_id),
    store: HistoryStore = Depends(get_history_store),
):
    """Get the user's study history, newest first."""
    items = store.list(user_id)
    return {
        "success": True,
        "history": [
            {
                "id": item.id,
                "topic": item.topic,
                "mode": item.mode.value,
                "timestamp": item.timestamp.isoformat(),
            }
            for item in items
        ],
    }


@app.delete("/api/history/{entry_id}")
def delete_history_item(
    entry_id: int,
    user_id: str = Depends(require_user_id),
    store: HistoryStore = Depends(get_history_store),
):
    if not store.delete(user_id, entry_id):
        raise HTTPException(status_code=404, detail="History item not found")
    return {"success": True, "message": "History item deleted"}


@app.delete("/api/history")
def clear_history(
    user_id: str = Depends(require_user_id),
    store: HistoryStore = Depends(get_history_store),
):
    removed = store.clear(user_id)
    logger.info("Cleared %d history entries for user %s", removed, user_id)
    return {"success": True, "message": "History cleared", "removed": removed}
