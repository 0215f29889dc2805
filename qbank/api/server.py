"""HTTP API serving randomized pages of the question bank.

Run locally with:

    qbank-server            # or: uvicorn qbank.api.server:app --reload
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config import CONFIG, AppConfig
from qbank import __version__
from qbank.query import StepFilter, query_questions
from qbank.store import QuestionBankError, load_questions
from qbank.utils.helpers import set_global_seed

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 1000


class QuestionOut(BaseModel):
    """One question record as stored in the bank."""

    question: str
    answer: str
    options: Dict[str, str]
    meta_info: str = ""


class QuestionPage(BaseModel):
    """Response model for GET /api/questions."""

    questions: List[QuestionOut]
    total: int = Field(..., description="Questions left after filtering, before pagination")
    offset: int
    limit: int


def create_app(config: AppConfig | None = None) -> FastAPI:
    cfg = config or CONFIG

    app = FastAPI(title="USMLE Quiz API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Root endpoint - API information"""
        return {
            "service": "USMLE Quiz API",
            "status": "running",
            "version": __version__,
            "endpoints": {
                "questions": "GET /api/questions",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/api/questions", response_model=QuestionPage)
    def list_questions(
        limit: int = Query(cfg.default_limit, ge=1, le=MAX_PAGE_SIZE),
        offset: int = Query(0, ge=0),
        step: Optional[StepFilter] = Query(None, description="Restrict to step1 or step2 questions"),
        exclude_visual: bool = Query(False, description="Drop questions that reference images or figures"),
        seed: Optional[int] = Query(None, description="Stable shuffle order for paging"),
    ):
        """Shuffled, paginated slice of the (optionally filtered) bank."""
        try:
            questions = load_questions(cfg.question_bank_path)
        except QuestionBankError:
            logger.exception("Error loading questions")
            return JSONResponse(status_code=500, content={"error": "Failed to load questions"})

        result = query_questions(
            questions,
            limit=limit,
            offset=offset,
            step=step,
            exclude_visual=exclude_visual,
            keywords=cfg.visual_keywords,
            seed=seed,
        )
        logger.info(
            "Served %d/%d questions (offset=%d, step=%s, exclude_visual=%s)",
            len(result.questions),
            result.total,
            offset,
            step.value if step else "all",
            exclude_visual,
        )
        return result.to_dict()

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


def main() -> None:
    import uvicorn

    logging.basicConfig(level=CONFIG.log_level)
    set_global_seed(CONFIG.seed)
    uvicorn.run("qbank.api.server:app", host=CONFIG.api_host, port=CONFIG.api_port)


if __name__ == "__main__":
    main()
