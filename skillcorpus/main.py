from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from skillcorpus import __version__
from skillcorpus.api.v1.middleware.error_handler import (
    ErrorHandlerMiddleware,
    http_error_handler,
    validation_error_handler,
)
from skillcorpus.api.v1.middleware.logging_middleware import LoggingMiddleware
from skillcorpus.api.v1.router import v1_router
from skillcorpus.config import settings
from skillcorpus.lint.linter import SkillLinter
from skillcorpus.skills.registry import SkillCorpus
from skillcorpus.utils.logging import get_logger, setup_logging


def load_corpus(corpus_dir: str) -> SkillCorpus:
    corpus = SkillCorpus(linter=SkillLinter(min_content_chars=settings.min_content_chars))
    corpus.discover(corpus_dir)
    return corpus


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(debug=settings.debug, level=settings.log_level)
    logger = get_logger("startup")
    logger.info("Starting skill corpus service", version=__version__)

    if getattr(app.state, "corpus", None) is None:
        app.state.corpus = load_corpus(settings.corpus_dir)
    logger.info("Corpus loaded", skill_count=len(app.state.corpus))

    yield

    logger.info("Shutting down")


def create_app(corpus: SkillCorpus | None = None) -> FastAPI:
    app = FastAPI(
        title="Skill Corpus",
        description="Serve and lint library skill files",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.corpus = corpus

    # The middleware added last is the outermost one: errors are turned into
    # responses before the access log sees them.
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
