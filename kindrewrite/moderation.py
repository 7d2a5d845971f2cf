# kindrewrite/moderation.py
from __future__ import annotations

"""
Moderation proxy

- ToxicityScorer:
    Capability with a single operation, score_toxicity(text, safer), returning
    the upstream result payload. Tests plug in a fake.

- GradioSpaceScorer:
    Calls the Hugging Face "Friendly Text Moderation" space through the Gradio
    HTTP API (POST /call/<api> for an event id, then GET the SSE result).
    One attempt per call; connection problems and timeouts surface as
    ServiceUnavailable so the caller can retry later.

- ModerationService:
    Validates input, checks the token is configured, calls the scorer and
    normalizes max_value into a 0-100 percentage.

The upstream payload looks like [plot, "<json>"], where the JSON holds the
per-category scores and max_value, the highest of them.
"""

import json
import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from numbers import Real
from typing import Any, Optional

import requests

from .errors import (
    ConfigurationError,
    InvalidInput,
    KindRewriteError,
    ModerationFailed,
    ServiceUnavailable,
    UpstreamFormatError,
)
from .settings import ModerationConfig

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 5000
DEFAULT_SAFER = 0.1

# Upstream statuses that mean "space asleep / overloaded", not "bad request"
_UNAVAILABLE_STATUSES = (502, 503, 504)


# ------------------------ Scorer base ------------------------
class ToxicityScorer:
    name: str

    def __init__(self, name: str) -> None:
        self.name = name

    def score_toxicity(self, text: str, safer: float) -> Any:
        raise NotImplementedError


# ------------------------ Gradio space scorer ------------------------
def parse_sse_result(body: str) -> Any:
    """Pull the payload of the `complete` event out of a Gradio SSE body."""
    event = None
    for line in body.splitlines():
        if line.startswith("event:"):
            event = line[len("event:"):].strip()
        elif line.startswith("data:"):
            data = line[len("data:"):].strip()
            if event == "complete":
                try:
                    return json.loads(data)
                except ValueError as e:
                    raise UpstreamFormatError("complete event is not JSON") from e
            if event == "error":
                logger.warning("moderation space reported an error: %s", data)
                raise ModerationFailed()
    raise UpstreamFormatError("no complete event in response")


class GradioSpaceScorer(ToxicityScorer):
    """
    Gradio HTTP API client for duchaba/Friendly_Text_Moderation (/fetch_toxicity_level).
    """

    def __init__(self, config: ModerationConfig) -> None:
        super().__init__("gradio")
        self.api_token = config.api_token
        self.base_url = config.base_url.rstrip("/")
        self.api_name = config.api_name.strip("/")
        self.timeout = config.timeout

    @property
    def call_url(self) -> str:
        return f"{self.base_url}/call/{self.api_name}"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _check(self, resp: requests.Response) -> None:
        if resp.status_code in _UNAVAILABLE_STATUSES:
            raise ServiceUnavailable()
        resp.raise_for_status()

    def score_toxicity(self, text: str, safer: float) -> Any:
        try:
            resp = requests.post(
                self.call_url,
                json={"data": [text, safer]},
                headers=self._headers(),
                timeout=self.timeout,
            )
            self._check(resp)
            try:
                event_id = resp.json()["event_id"]
            except (ValueError, KeyError, TypeError) as e:
                raise UpstreamFormatError("missing event_id") from e

            resp = requests.get(
                f"{self.call_url}/{event_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
            self._check(resp)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ServiceUnavailable() from e

        return parse_sse_result(resp.text)


# ------------------------ Normalization ------------------------
def extract_max_value(raw: Any) -> float:
    """max_value from data[1] of the upstream result, validated to [0, 1]."""
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        raise UpstreamFormatError("expected a result list with at least 2 items")

    payload = raw[1]
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise UpstreamFormatError("score payload is not valid JSON") from e
    if not isinstance(payload, dict) or "max_value" not in payload:
        raise UpstreamFormatError("max_value missing from score payload")

    value = payload["max_value"]
    if isinstance(value, bool) or not isinstance(value, Real):
        raise UpstreamFormatError(f"max_value is not a number: {value!r}")
    value = float(value)
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise UpstreamFormatError(f"max_value out of range: {value!r}")
    return value


def to_percent(fraction: float) -> int:
    """
    Round half away from zero on the fraction's decimal representation,
    so 0.754 -> 75 and 0.755 -> 76 (binary float noise does not leak in).
    """
    pct = Decimal(str(fraction)) * 100
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ------------------------ Service ------------------------
@dataclass(frozen=True)
class ModerationResult:
    score_percent: int
    score_fraction: float
    raw_payload: Any


def _validate(text: Any, safer: Any) -> None:
    if not isinstance(text, str):
        raise InvalidInput("Invalid input: text field is required and must be a string")
    if not text.strip():
        raise InvalidInput("Invalid input: text cannot be empty")
    if len(text) > MAX_TEXT_LENGTH:
        raise InvalidInput(f"Invalid input: text is too long (max {MAX_TEXT_LENGTH} characters)")
    if isinstance(safer, bool) or not isinstance(safer, Real) or not 0.0 <= safer <= 1.0:
        raise InvalidInput("Invalid input: safer must be a number between 0 and 1")


class ModerationService:
    """
    Toxicity check through a ToxicityScorer.
    Configure via ModerationConfig (HF_TOKEN, MODERATION_* settings).
    """

    def __init__(self, config: ModerationConfig, scorer: Optional[ToxicityScorer] = None) -> None:
        self.config = config
        self.scorer = scorer or GradioSpaceScorer(config)

    def moderate(self, text: str, safer: float = DEFAULT_SAFER) -> ModerationResult:
        _validate(text, safer)
        if not self.config.configured:
            raise ConfigurationError()

        try:
            raw = self.scorer.score_toxicity(text, float(safer))
            fraction = extract_max_value(raw)
        except KindRewriteError:
            raise
        except Exception as e:
            raise ModerationFailed() from e

        pct = to_percent(fraction)
        logger.info("moderation via %s: %d%% (%d chars, safer=%s)", self.scorer.name, pct, len(text), safer)
        return ModerationResult(score_percent=pct, score_fraction=fraction, raw_payload=raw)
