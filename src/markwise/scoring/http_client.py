"""
HTTP Scorer Client

aiohttp client for the remote semantic scorer service, with per-call
timeouts, optional retries, and strict response validation.
"""

import json
import math
import time
import asyncio
from typing import Dict, Any, Optional
import aiohttp

from .base import ScorerClient, ScoreResponse
from markwise.core.config import ScorerConfig
from markwise.core.exceptions import (
    ScoringServiceError,
    ScoringTimeoutError,
    InvalidScoringResponseError,
)
from markwise.utils.logging import get_logger
from markwise.utils.async_helpers import retry_async

logger = get_logger(__name__)


class HttpScorerClient(ScorerClient):
    """Client for the semantic scorer's HTTP/JSON API."""

    HEALTH_PATH = "/health"
    COMPARE_PATH = "/compare"
    COMPARE_QUESTIONS_PATH = "/compare-questions"

    def __init__(self, base_url: Optional[str] = None,
                 config: Optional[ScorerConfig] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize the scorer client.

        Args:
            base_url: Scorer base URL (overrides ``config.base_url``)
            config: Scorer configuration (defaults used if None)
            session: Pre-built aiohttp session to use instead of creating one
        """
        self.config = config or ScorerConfig()
        self.base_url = ""
        self.set_server_url(base_url or self.config.base_url)

        self.session = session
        self._owns_session = session is None

    def set_server_url(self, url: str) -> None:
        """Point the client at a new scorer, dropping any trailing slash."""
        self.base_url = url.rstrip("/")
        logger.info(f"Scorer server URL set to {self.base_url}")

    def get_status(self) -> Dict[str, Any]:
        """Describe the configured endpoints."""
        return {
            "server_url": self.base_url,
            "is_configured": bool(self.base_url),
            "health_endpoint": f"{self.base_url}{self.HEALTH_PATH}",
            "compare_endpoint": f"{self.base_url}{self.COMPARE_PATH}",
            "question_endpoint": f"{self.base_url}{self.COMPARE_QUESTIONS_PATH}",
            "timeout_seconds": self.config.timeout,
            "max_retries": self.config.max_retries,
        }

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists."""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self.session = aiohttp.ClientSession(
                timeout=timeout, headers=self.config.headers
            )
            self._owns_session = True
        return self.session

    async def check_health(self) -> Dict[str, Any]:
        """Call ``GET /health`` and return its JSON payload."""
        session = await self._ensure_session()
        return await self._request(session, "GET", self.HEALTH_PATH)

    async def compare_answers(self, student_answer: str, model_answer: str,
                              max_mark: int) -> ScoreResponse:
        """Call ``POST /compare`` and validate the marking payload."""
        payload = {
            "studentAnswer": student_answer,
            "modelAnswer": model_answer,
            "maxMark": max_mark,
        }
        logger.debug(f"Sending answer comparison request (maxMark={max_mark})")

        start_time = time.time()
        result = await self._call_with_retry(self.COMPARE_PATH, payload)
        latency_ms = (time.time() - start_time) * 1000

        mark = result.get("markAwarded")
        explanation = result.get("explanation")

        # bool is an int subclass; the scorer must send a real number
        if (isinstance(mark, bool) or not isinstance(mark, (int, float))
                or not math.isfinite(mark)):
            raise InvalidScoringResponseError(
                "Invalid response format from server: markAwarded must be a number",
                endpoint=self.COMPARE_PATH,
                response_body=json.dumps(result, default=str),
            )
        if not isinstance(explanation, str):
            raise InvalidScoringResponseError(
                "Invalid response format from server: explanation must be a string",
                endpoint=self.COMPARE_PATH,
                response_body=json.dumps(result, default=str),
            )

        logger.debug(f"Answer comparison returned {mark} in {latency_ms:.0f}ms")
        return ScoreResponse(
            mark_awarded=float(mark),
            explanation=explanation,
            latency_ms=latency_ms,
            raw=result,
        )

    async def compare_questions(self, student_question: str,
                                model_question: str) -> bool:
        """Call ``POST /compare-questions``; only a literal ``true`` counts as same."""
        payload = {
            "studentQuestion": student_question,
            "modelQuestion": model_question,
        }
        result = await self._call_with_retry(self.COMPARE_QUESTIONS_PATH, payload)
        return result.get("isSame") is True

    async def _call_with_retry(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        session = await self._ensure_session()
        return await retry_async(
            lambda: self._request(session, "POST", path, payload),
            max_retries=self.config.max_retries,
            base_delay=self.config.retry_base_delay,
            description=f"POST {path}",
        )

    async def _request(self, session: aiohttp.ClientSession, method: str,
                       path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make one HTTP request and decode a JSON object from the response."""
        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        try:
            async with session.request(method, url, json=payload, timeout=timeout) as response:
                response_text = await response.text()

                if not 200 <= response.status < 300:
                    raise ScoringServiceError(
                        f"HTTP {response.status}: {response_text[:200]}",
                        endpoint=path,
                        status_code=response.status,
                        response_body=response_text,
                    )

                try:
                    data = json.loads(response_text)
                except json.JSONDecodeError as e:
                    raise InvalidScoringResponseError(
                        f"Invalid JSON response: {str(e)}",
                        endpoint=path,
                        status_code=response.status,
                        response_body=response_text,
                    ) from e

                if not isinstance(data, dict):
                    raise InvalidScoringResponseError(
                        "Invalid response format from server: expected a JSON object",
                        endpoint=path,
                        status_code=response.status,
                        response_body=response_text,
                    )
                return data

        except asyncio.TimeoutError as e:
            raise ScoringTimeoutError(
                f"Scorer did not respond within {self.config.timeout}s",
                timeout_seconds=self.config.timeout,
                endpoint=path,
            ) from e
        except aiohttp.ClientError as e:
            raise ScoringServiceError(
                f"HTTP client error: {str(e)}",
                endpoint=path,
            ) from e

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
