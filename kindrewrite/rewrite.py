# kindrewrite/rewrite.py
from __future__ import annotations

"""
Rule-based rewrite engine

Two phases, both pure:
  1) soften(): ordered whole-word substitutions that swap harsh vocabulary for
     milder phrasing. Matching is case-insensitive and uses Python's Unicode
     word boundaries, so fragments like "stupidity" or "NEVERMIND" are left
     alone while "stupid's" still becomes "unclear's".
  2) wrap(): a per-tone template around the softened text.

No model calls, no randomness: the same (text, tone) always gives the same output.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple, Union

from .errors import InternalError, InvalidInput, KindRewriteError

logger = logging.getLogger(__name__)


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    CALM = "calm"
    FRIENDLY = "friendly"
    SHORT = "short"


TONE_CHOICES = ", ".join(t.value for t in Tone)


# ------------------------ Softening rules ------------------------
@dataclass(frozen=True)
class SubstitutionRule:
    pattern: re.Pattern
    replacement: str

    @classmethod
    def words(cls, words: Sequence[str], replacement: str) -> "SubstitutionRule":
        alternatives = "|".join(re.escape(w) for w in words)
        return cls(re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE), replacement)

    def apply(self, text: str) -> str:
        # Callable replacement so the text is inserted literally, never as a template
        return self.pattern.sub(lambda _m: self.replacement, text)


SUBSTITUTION_RULES: Tuple[SubstitutionRule, ...] = (
    SubstitutionRule.words(("stupid", "dumb", "idiotic", "moronic"), "unclear"),
    SubstitutionRule.words(("hate", "despise", "loathe"), "don't prefer"),
    SubstitutionRule.words(("terrible", "awful", "horrible", "atrocious"), "not ideal"),
    SubstitutionRule.words(("never", "always"), "sometimes"),
    SubstitutionRule.words(("useless", "worthless"), "not quite working"),
    SubstitutionRule.words(("waste of time",), "could be optimized"),
    SubstitutionRule.words(("wrong", "incorrect"), "might need adjustment"),
    SubstitutionRule.words(("obviously", "clearly"), "it seems"),
    SubstitutionRule.words(("fail", "failed", "failure"), "didn't work out"),
    SubstitutionRule.words(("ridiculous", "absurd"), "surprising"),
)


def soften(text: str, rules: Sequence[SubstitutionRule] = SUBSTITUTION_RULES) -> str:
    for rule in rules:
        text = rule.apply(text)
    return text


# ------------------------ Tone templates ------------------------
_WS = re.compile(r"\s+")
_FIRST_SENTENCE = re.compile(r"^[^.!?]+[.!?]")
SHORT_FALLBACK_CHARS = 100


def normalize_whitespace(text: str) -> str:
    return _WS.sub(" ", text).strip()


def capitalize_first(text: str) -> str:
    # ASCII only, so the result never depends on locale or Unicode case tables
    if text[:1].isascii() and text[:1].islower():
        return text[0].upper() + text[1:]
    return text


def first_sentence(text: str) -> str:
    """Text up to the first '.', '!' or '?', else the first 100 characters."""
    m = _FIRST_SENTENCE.match(text)
    return m.group(0) if m else text[:SHORT_FALLBACK_CHARS]


@dataclass(frozen=True)
class ToneTemplate:
    intro: str
    outro: str

    def render(self, text: str) -> str:
        return self.intro + capitalize_first(normalize_whitespace(text)) + self.outro


@dataclass(frozen=True)
class ShortTemplate(ToneTemplate):
    """Condenses to the main point; no capitalization pass."""

    def render(self, text: str) -> str:
        core = first_sentence(normalize_whitespace(text)).strip()
        return self.intro + core + self.outro


TONE_TEMPLATES: Mapping[Tone, ToneTemplate] = MappingProxyType({
    Tone.PROFESSIONAL: ToneTemplate(
        intro="I wanted to share some feedback regarding this matter. ",
        outro=" I believe addressing this could lead to better outcomes. Please let me know your thoughts.",
    ),
    Tone.CALM: ToneTemplate(
        intro="I understand there may be different perspectives here. ",
        outro=" I'd appreciate the opportunity to discuss this further when you have time.",
    ),
    Tone.FRIENDLY: ToneTemplate(
        intro="Hey! I wanted to chat about something. ",
        outro=" Would love to hear your take on this! 😊",
    ),
    Tone.SHORT: ShortTemplate(
        intro="Quick note: ",
        outro=" Let's discuss.",
    ),
})


def wrap(text: str, tone: Tone, templates: Mapping[Tone, ToneTemplate] = TONE_TEMPLATES) -> str:
    return templates[tone].render(text)


# ------------------------ Service ------------------------
@dataclass(frozen=True)
class RewriteResult:
    rewritten_text: str
    tone: Tone


def parse_tone(tone: Union[str, Tone, None]) -> Tone:
    try:
        return Tone(tone)
    except ValueError:
        raise InvalidInput(f"Invalid input: tone must be one of: {TONE_CHOICES}") from None


class RuleBasedRewriter:
    """Softening + tone wrapping over fixed tables (swap them in for tests or new rule sets)."""

    def __init__(
        self,
        rules: Sequence[SubstitutionRule] = SUBSTITUTION_RULES,
        templates: Mapping[Tone, ToneTemplate] = TONE_TEMPLATES,
    ) -> None:
        self.rules = tuple(rules)
        self.templates = templates

    def rewrite(self, text: str, tone: Union[str, Tone]) -> RewriteResult:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInput("Invalid input: text field is required and must be a non-empty string")
        parsed = parse_tone(tone)

        try:
            rewritten = wrap(soften(text, self.rules), parsed, self.templates)
        except KindRewriteError:
            raise
        except Exception as e:
            raise InternalError() from e

        logger.debug("rewrite tone=%s in=%d out=%d chars", parsed.value, len(text), len(rewritten))
        return RewriteResult(rewritten_text=rewritten, tone=parsed)


def rewrite(text: str, tone: Union[str, Tone]) -> str:
    """Shorthand for RuleBasedRewriter().rewrite(...).rewritten_text."""
    return RuleBasedRewriter().rewrite(text, tone).rewritten_text
