import random
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from ...core.config import Settings, get_settings
from ...core.exceptions import PersistenceError
from ...core.interfaces import FeedbackGenerator, FeedbackStore
from ...core.logging import setup_logging
from ...managers.feedback import FeedbackOrchestrator
from ...managers.generation import OpenAIFeedbackGenerator
from ...processors.feedback import FeedbackSynthesizer
from ...processors.sentiment import SentimentScorer
from ...processors.speech import SpeechAnalyzer
from ...storage.repository import SqlFeedbackStore

logger = structlog.get_logger(__name__)

def create_app(settings: Optional[Settings] = None,
               store: Optional[FeedbackStore] = None,
               generator: Optional[FeedbackGenerator] = None,
               rng: Optional[random.Random] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version="0.1.0"
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with actual origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    store = store or SqlFeedbackStore.from_url(settings.DATABASE_URL)
    generator = generator or OpenAIFeedbackGenerator(settings)
    speech_analyzer = SpeechAnalyzer()

    app.state.settings = settings
    app.state.store = store
    app.state.scorer = SentimentScorer()
    app.state.speech_analyzer = speech_analyzer
    app.state.synthesizer = FeedbackSynthesizer(rng=rng, max_items=settings.FEEDBACK_MAX_ITEMS)
    app.state.orchestrator = FeedbackOrchestrator(
        generator=generator,
        store=store,
        speech_analyzer=speech_analyzer,
        settings=settings,
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("request_persistence_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=503, content={"detail": "Feedback store unavailable"})

    # Include routers
    from .routers import analysis, feedback, health, interviews
    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(analysis.router, prefix=settings.API_PREFIX)
    app.include_router(interviews.router, prefix=settings.API_PREFIX)
    app.include_router(feedback.router, prefix=settings.API_PREFIX)

    logger.info("app_created", environment=settings.ENVIRONMENT.value)
    return app
