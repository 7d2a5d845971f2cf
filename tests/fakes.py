"""Stand-ins for the remote scorer."""

from __future__ import annotations

import json

from kindrewrite.moderation import ToxicityScorer


def upstream_result(max_value, **scores) -> list:
    """Shape of the space's answer: [plot, json string of scores]."""
    return [{"type": "plot"}, json.dumps({**scores, "max_value": max_value})]


class FakeScorer(ToxicityScorer):
    def __init__(self, result=None, exc: Exception | None = None):
        super().__init__("fake")
        self.result = result
        self.exc = exc
        self.calls: list[tuple[str, float]] = []

    def score_toxicity(self, text, safer):
        self.calls.append((text, safer))
        if self.exc is not None:
            raise self.exc
        return self.result
