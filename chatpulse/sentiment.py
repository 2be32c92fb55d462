"""
Rule-based sentiment intensity analysis.

Scores free text with a valence lexicon and a handful of heuristics modelled
on VADER (Hutto & Gilbert, 2014):

  - booster / dampener words in front of a sentiment word shift its intensity
  - negation in the preceding window flips and dampens it
  - ALL CAPS words in mixed-case text are emphasized
  - idioms override the valence of the words they are made of
  - clauses after "but" outweigh the ones before it
  - exclamation marks and trailing question marks add emphasis

Public API:
    analyzer = SentimentIntensityAnalyzer()
    score    = analyzer.polarity_scores("The support team was GREAT!")
    # -> SentimentScore(positive=..., negative=0.0, neutral=..., compound=...)

    aggregate_sentiment(["I love this!", "This is terrible."])

Scores are not rounded and depend only on the input text and the lexicon.
"""
from __future__ import annotations

import math
import string
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from .lexicon import Lexicon, default_lexicon
from .models import SentimentScore


@dataclass(frozen=True)
class ScoringConstants:
    """Tunable constants of the scoring rules."""

    # Added to |valence| per booster word, subtracted per dampener
    booster_increment: float = 0.293
    # Emphasis for an ALL CAPS word in mixed-case text
    caps_increment: float = 0.733
    # Multiplier applied to a negated valence
    negation_scalar: float = -0.74
    # Multiplier for "never so ..." / "never this ..."
    never_so_scalar: float = 1.25
    # Preceding tokens inspected for modifiers and negations
    modifier_window: int = 3
    # Booster scaling by distance 1, 2, 3 from the sentiment word
    distance_damping: Tuple[float, ...] = (1.0, 0.95, 0.90)
    # Contrastive conjunction weights
    before_contrast_scalar: float = 0.5
    after_contrast_scalar: float = 1.5
    exclamation_increment: float = 0.292
    max_exclamations: int = 4
    question_increment: float = 0.18
    max_question_emphasis: float = 0.96
    # Normalization constant of the compound score
    alpha: float = 15.0
    # Valences within this distance of 0 count as neutral
    neutral_epsilon: float = 1e-9


DEFAULT_CONSTANTS = ScoringConstants()

CONTRASTIVE_CONJUNCTIONS = frozenset({"but", "however"})
NEVER_SO_WORDS = frozenset({"so", "this"})


class SentimentIntensityAnalyzer:
    """Scores texts against a shared, read-only lexicon.

    Args:
        lexicon: Lexicon to use (defaults to the process-wide bundled lexicon)
        constants: Rule constants (defaults to ``DEFAULT_CONSTANTS``)
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        constants: Optional[ScoringConstants] = None,
    ):
        self.lexicon = lexicon if lexicon is not None else default_lexicon()
        self.constants = constants if constants is not None else DEFAULT_CONSTANTS

    def polarity_scores(self, text) -> SentimentScore:
        """Return positive/negative/neutral proportions and the compound score.

        Anything that is not a non-blank string scores as fully neutral.
        """
        if not isinstance(text, str) or not text.strip():
            return SentimentScore.neutral_default()

        tokens = self.tokenize(text)
        if not tokens:
            return SentimentScore.neutral_default()

        valences = self.token_valences(tokens)
        valences = self._contrastive_check(tokens, valences)
        return self._score_valences(valences, text)

    def tokenize(self, text: str) -> List[str]:
        """Split on whitespace and strip surrounding punctuation.

        Tokens that are lexicon entries as written (emoticons such as ``:)``)
        or that consist of punctuation only are kept unchanged.
        """
        tokens = []
        for word in text.split():
            stripped = word.strip(string.punctuation)
            if stripped and self.lexicon.lookup(word) is None:
                tokens.append(stripped)
            else:
                tokens.append(word)
        return tokens

    def token_valences(self, tokens: Sequence[str]) -> List[float]:
        """Adjusted valence of every token, aligned with ``tokens``."""
        is_cap_diff = _allcap_differential(tokens)
        valences = [0.0] * len(tokens)

        i = 0
        while i < len(tokens):
            idiom = self.lexicon.match_idiom(tokens, i)
            if idiom is not None:
                length, valence = idiom
                # The whole span is scored once, at its first token
                valences[i] = valence
                i += length
                continue
            valences[i] = self._token_valence(tokens, i, is_cap_diff)
            i += 1

        return valences

    def _token_valence(self, tokens: Sequence[str], i: int, is_cap_diff: bool) -> float:
        token = tokens[i]
        if self.lexicon.is_modifier(token):
            return 0.0
        # "kind of" is a hedge, not kindness
        if token.lower() == "kind" and i + 1 < len(tokens) and tokens[i + 1].lower() == "of":
            return 0.0

        valence = self.lexicon.lookup(token)
        if valence is None:
            return 0.0

        valence += self._modifier_shift(tokens, i, valence, is_cap_diff)
        valence *= self._negation_multiplier(tokens, i)

        if is_cap_diff and token.isupper():
            if valence > 0:
                valence += self.constants.caps_increment
            elif valence < 0:
                valence -= self.constants.caps_increment

        return valence

    def _modifier_shift(
        self,
        tokens: Sequence[str],
        i: int,
        valence: float,
        is_cap_diff: bool,
    ) -> float:
        c = self.constants
        shift = 0.0
        for distance in range(1, c.modifier_window + 1):
            j = i - distance
            if j < 0:
                break
            previous = tokens[j]
            if self.lexicon.lookup(previous) is not None:
                continue

            if self.lexicon.is_booster(previous):
                scalar = c.booster_increment
            elif self.lexicon.is_dampener(previous):
                scalar = -c.booster_increment
            else:
                continue

            if valence < 0:
                scalar = -scalar
            if is_cap_diff and previous.isupper():
                scalar += c.caps_increment if valence > 0 else -c.caps_increment

            shift += scalar * c.distance_damping[min(distance, len(c.distance_damping)) - 1]
        return shift

    def _negation_multiplier(self, tokens: Sequence[str], i: int) -> float:
        c = self.constants
        window = [token.lower() for token in tokens[max(0, i - c.modifier_window):i]]
        if not window:
            return 1.0

        for k, word in enumerate(window):
            following = window[k + 1:]
            if word == "never" and NEVER_SO_WORDS.intersection(following):
                return c.never_so_scalar
            if word == "without" and following[:1] == ["doubt"]:
                return 1.0

        if window[-1] == "least" and (len(window) < 2 or window[-2] not in ("at", "very")):
            return c.negation_scalar

        if any(self.lexicon.is_negation(word) for word in window):
            return c.negation_scalar
        return 1.0

    def _contrastive_check(self, tokens: Sequence[str], valences: List[float]) -> List[float]:
        conjunction_index = next(
            (idx for idx, token in enumerate(tokens) if token.lower() in CONTRASTIVE_CONJUNCTIONS),
            None,
        )
        if conjunction_index is None:
            return valences

        c = self.constants
        adjusted = list(valences)
        for idx, valence in enumerate(valences):
            if idx < conjunction_index:
                adjusted[idx] = valence * c.before_contrast_scalar
            elif idx > conjunction_index:
                adjusted[idx] = valence * c.after_contrast_scalar
        return adjusted

    def _punctuation_emphasis(self, text: str) -> float:
        c = self.constants
        emphasis = min(text.count("!"), c.max_exclamations) * c.exclamation_increment

        stripped = text.rstrip()
        question_run = len(stripped) - len(stripped.rstrip("?"))
        if question_run > 1:
            if question_run <= 3:
                emphasis += question_run * c.question_increment
            else:
                emphasis += c.max_question_emphasis
        return emphasis

    def _score_valences(self, valences: Sequence[float], text: str) -> SentimentScore:
        c = self.constants
        total = float(sum(valences))
        punctuation = self._punctuation_emphasis(text)

        raw = total
        if total > 0:
            raw += punctuation
        elif total < 0:
            raw -= punctuation
        compound = normalize(raw, c.alpha)

        positive_sum = sum(v + 1 for v in valences if v > c.neutral_epsilon)
        negative_sum = sum(v - 1 for v in valences if v < -c.neutral_epsilon)
        neutral_count = sum(1 for v in valences if abs(v) <= c.neutral_epsilon)

        if positive_sum > abs(negative_sum):
            positive_sum += punctuation
        elif positive_sum < abs(negative_sum):
            negative_sum -= punctuation
        elif total > 0:
            positive_sum += punctuation
        elif total < 0:
            negative_sum -= punctuation

        mass = positive_sum + abs(negative_sum) + neutral_count
        if mass == 0:
            return SentimentScore.neutral_default()

        return SentimentScore(
            positive=abs(positive_sum / mass),
            negative=abs(negative_sum / mass),
            neutral=abs(neutral_count / mass),
            compound=compound,
        )


def normalize(score: float, alpha: float = DEFAULT_CONSTANTS.alpha) -> float:
    """Map an unbounded valence sum to [-1, 1]: score / sqrt(score^2 + alpha)."""
    if score == 0:
        return 0.0
    value = score / math.sqrt(score * score + alpha)
    return max(-1.0, min(1.0, value))


def _allcap_differential(tokens: Sequence[str]) -> bool:
    """True when some, but not all, cased tokens are ALL CAPS.

    Emoticons, numbers and punctuation have no case and are not counted.
    """
    cased = [token for token in tokens if any(ch.isalpha() for ch in token)]
    allcap_count = sum(1 for token in cased if token.isupper())
    return 0 < allcap_count < len(cased)


def mean_sentiment(scores: Iterable[Optional[SentimentScore]]) -> SentimentScore:
    """Field-wise arithmetic mean of scores; absent scores are skipped."""
    present = [score for score in scores if score is not None]
    if not present:
        return SentimentScore.neutral_default()

    count = len(present)
    return SentimentScore(
        positive=sum(score.positive for score in present) / count,
        negative=sum(score.negative for score in present) / count,
        neutral=sum(score.neutral for score in present) / count,
        compound=sum(score.compound for score in present) / count,
    )


@lru_cache(maxsize=1)
def default_analyzer() -> SentimentIntensityAnalyzer:
    """Shared analyzer over the default lexicon."""
    return SentimentIntensityAnalyzer()


def polarity_scores(text) -> SentimentScore:
    """Module-level convenience function using the default analyzer."""
    return default_analyzer().polarity_scores(text)


def aggregate_sentiment(
    texts: Optional[Iterable],
    analyzer: Optional[SentimentIntensityAnalyzer] = None,
) -> SentimentScore:
    """Score each text and average the results; every text counts equally."""
    if analyzer is None:
        analyzer = default_analyzer()
    return mean_sentiment(analyzer.polarity_scores(text) for text in (texts or ()))
