"""Question loading for the quiz UI.

The UI either talks to a running `qbank-server` (when `QBANK_API_URL` is set)
or runs the same store + query pipeline in-process.
"""

from __future__ import annotations

import logging

import httpx

from config import CONFIG, AppConfig
from qbank.query import QueryResult, StepFilter, query_questions
from qbank.store import QuestionBankError, load_questions

logger = logging.getLogger(__name__)


def fetch_questions(
    base_url: str,
    *,
    limit: int = 50,
    offset: int = 0,
    step: StepFilter | str | None = None,
    exclude_visual: bool = False,
    seed: int | None = None,
    timeout: float = 10.0,
    transport: httpx.BaseTransport | None = None,
) -> QueryResult:
    """GET /api/questions and decode the page."""

    params: dict[str, str | int] = {"limit": limit, "offset": offset}
    if step is not None:
        params["step"] = StepFilter(step).value
    if exclude_visual:
        params["exclude_visual"] = "true"
    if seed is not None:
        params["seed"] = seed

    url = base_url.rstrip("/") + "/api/questions"
    logger.debug("Fetching questions from %s with %s", url, params)

    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            resp = client.get(url, params=params)
    except httpx.HTTPError as exc:
        raise QuestionBankError(f"Failed to reach question API at {url}: {exc}") from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        raise QuestionBankError(f"Non-JSON response from {url} (status {resp.status_code})") from exc

    if isinstance(payload, dict) and payload.get("error"):
        raise QuestionBankError(str(payload["error"]))
    if resp.status_code >= 400:
        raise QuestionBankError(f"Question API returned status {resp.status_code}")

    try:
        return QueryResult.from_dict(payload)
    except (TypeError, ValueError) as exc:
        raise QuestionBankError(f"Malformed question payload from {url}: {exc}") from exc


def load_quiz_questions(
    config: AppConfig | None = None,
    *,
    limit: int | None = None,
    offset: int = 0,
    step: StepFilter | str | None = None,
    exclude_visual: bool = False,
    seed: int | None = None,
) -> QueryResult:
    cfg = config or CONFIG
    limit = limit if limit is not None else cfg.default_limit

    if cfg.api_url:
        return fetch_questions(
            cfg.api_url,
            limit=limit,
            offset=offset,
            step=step,
            exclude_visual=exclude_visual,
            seed=seed,
            timeout=cfg.api_timeout,
        )

    return query_questions(
        load_questions(cfg.question_bank_path),
        limit=limit,
        offset=offset,
        step=step,
        exclude_visual=exclude_visual,
        keywords=cfg.visual_keywords,
        seed=seed,
    )
