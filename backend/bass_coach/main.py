import logging
from typing import Dict, List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .coach_routes import router as coach_router
from .config import get_settings
from .curriculum_catalog import CATALOG, LessonTemplate
from .logging_config import configure_logging
from .profile_routes import router as profile_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="Bass Coach Backend", version="0.1.0")

settings_snapshot = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings_snapshot.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(profile_router)
app.include_router(coach_router)

logger.info("Backend starting with profile store: %s", settings_snapshot.profile_store_path)
logger.info("OpenAI API key configured: %s", bool(settings_snapshot.openai_api_key))


@app.get("/healthz")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/api/curriculum", response_model=List[LessonTemplate])
def list_curriculum() -> List[LessonTemplate]:
    return list(CATALOG)
