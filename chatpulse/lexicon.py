"""
Sentiment lexicon store.

Holds the token -> valence mapping used by the polarity scorer together with
the modifier word sets it consults (negations, boosters, dampeners) and the
idiom overrides. A ``Lexicon`` is immutable once built; the default one is
loaded from the bundled ``data/lexicon.txt`` on first use and shared by every
analyzer in the process.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from . import config
from .exceptions import LexiconLoadError
from .logging import get_logger

logger = get_logger("lexicon")

BUNDLED_LEXICON_PATH = Path(__file__).parent / "data" / "lexicon.txt"

MIN_VALENCE = -4.0
MAX_VALENCE = 4.0

NEGATIONS = frozenset({
    "aint", "ain't", "arent", "aren't", "cannot", "cant", "can't", "couldnt",
    "couldn't", "darent", "daren't", "despite", "didnt", "didn't", "doesnt",
    "doesn't", "dont", "don't", "hadnt", "hadn't", "hasnt", "hasn't", "havent",
    "haven't", "isnt", "isn't", "mightnt", "mightn't", "mustnt", "mustn't",
    "neednt", "needn't", "neither", "never", "none", "nope", "nor", "not",
    "nothing", "nowhere", "oughtnt", "oughtn't", "rarely", "seldom", "shant",
    "shan't", "shouldnt", "shouldn't", "uhuh", "uh-uh", "wasnt", "wasn't",
    "werent", "weren't", "without", "wont", "won't", "wouldnt", "wouldn't",
})

BOOSTERS = frozenset({
    "absolutely", "amazingly", "awfully", "completely", "considerably",
    "decidedly", "deeply", "enormously", "entirely", "especially",
    "exceptionally", "extremely", "fabulously", "flipping", "freaking",
    "fricking", "frickin", "fully", "greatly", "hella", "highly", "hugely",
    "incredibly", "intensely", "majorly", "more", "most", "particularly",
    "purely", "quite", "really", "remarkably", "so", "substantially",
    "thoroughly", "totally", "tremendously", "uber", "unbelievably",
    "unusually", "utterly", "very",
})

DAMPENERS = frozenset({
    "almost", "barely", "hardly", "kinda", "kindof", "kind-of", "less",
    "little", "marginally", "occasionally", "partly", "scarcely", "slightly",
    "somewhat", "sorta", "sortof", "sort-of",
})

IDIOMS: Dict[str, float] = {
    "back handed": -2.0,
    "bad ass": 1.5,
    "beating heart": 3.1,
    "blow smoke": -2.0,
    "blowing smoke": -2.0,
    "break a leg": 2.0,
    "broken heart": -2.9,
    "cooking with gas": 2.0,
    "cut the mustard": 2.0,
    "hand to mouth": -2.0,
    "in the black": 2.0,
    "in the red": -2.0,
    "kiss of death": -1.5,
    "no problem": 1.5,
    "no worries": 1.5,
    "on the ball": 2.0,
    "the bomb": 3.0,
    "to die for": 3.0,
    "under the weather": -2.0,
    "upper hand": 1.0,
    "yeah right": -2.0,
}


class Lexicon:
    """Read-only valence lexicon plus the word sets used by the scoring rules."""

    def __init__(
        self,
        valences: Mapping[str, float],
        negations: Iterable[str] = NEGATIONS,
        boosters: Iterable[str] = BOOSTERS,
        dampeners: Iterable[str] = DAMPENERS,
        idioms: Optional[Mapping[str, float]] = None,
    ):
        self._valences = MappingProxyType({token.lower(): float(v) for token, v in valences.items()})
        self.negations = frozenset(word.lower() for word in negations)
        self.boosters = frozenset(word.lower() for word in boosters)
        self.dampeners = frozenset(word.lower() for word in dampeners) - self.boosters
        idioms = IDIOMS if idioms is None else idioms
        parsed: Dict[Tuple[str, ...], float] = {}
        for phrase, valence in idioms.items():
            words = tuple(phrase.lower().split())
            if words:
                parsed[words] = float(valence)
        self._idioms = MappingProxyType(parsed)
        self._idioms_by_first = MappingProxyType(_index_idioms(parsed))

    def __len__(self) -> int:
        return len(self._valences)

    def __contains__(self, token: str) -> bool:
        return token.lower() in self._valences

    @property
    def idioms(self) -> Mapping[Tuple[str, ...], float]:
        return self._idioms

    def lookup(self, token: str) -> Optional[float]:
        """Return the valence of ``token`` or None for an unknown token."""
        return self._valences.get(token.lower())

    def is_negation(self, token: str) -> bool:
        lowered = token.lower()
        return lowered in self.negations or "n't" in lowered

    def is_booster(self, token: str) -> bool:
        return token.lower() in self.boosters

    def is_dampener(self, token: str) -> bool:
        return token.lower() in self.dampeners

    def is_modifier(self, token: str) -> bool:
        return self.is_booster(token) or self.is_dampener(token) or self.is_negation(token)

    def match_idiom(self, tokens: Sequence[str], start: int) -> Optional[Tuple[int, float]]:
        """Return ``(length, valence)`` of the longest idiom starting at ``start``."""
        candidates = self._idioms_by_first.get(tokens[start].lower())
        if not candidates:
            return None
        for words, valence in candidates:
            end = start + len(words)
            if end > len(tokens):
                continue
            if tuple(token.lower() for token in tokens[start:end]) == words:
                return len(words), valence
        return None


def _index_idioms(idioms: Mapping[Tuple[str, ...], float]) -> Dict[str, list]:
    by_first: Dict[str, list] = {}
    for words, valence in idioms.items():
        by_first.setdefault(words[0], []).append((words, valence))
    # Longest match wins
    for candidates in by_first.values():
        candidates.sort(key=lambda item: -len(item[0]))
    return by_first


def parse_lexicon_lines(lines: Iterable[str], source="<lexicon>") -> Tuple[Dict[str, float], Dict[str, float]]:
    """Parse ``token<TAB>valence`` lines into (word valences, idiom valences)."""
    valences: Dict[str, float] = {}
    idioms: Dict[str, float] = {}
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        fields = line.split("\t")
        if len(fields) < 2:
            raise LexiconLoadError(source, line_number, "expected token<TAB>valence")
        token = fields[0].strip().lower()
        if not token:
            raise LexiconLoadError(source, line_number, "empty token")
        try:
            valence = float(fields[1])
        except ValueError:
            raise LexiconLoadError(source, line_number, f"invalid valence {fields[1]!r}") from None
        if not MIN_VALENCE <= valence <= MAX_VALENCE:
            raise LexiconLoadError(
                source, line_number, f"valence {valence} outside [{MIN_VALENCE}, {MAX_VALENCE}]"
            )
        if " " in token:
            idioms[" ".join(token.split())] = valence
        else:
            valences[token] = valence
    return valences, idioms


def load_lexicon(path: Path) -> Lexicon:
    """Build a lexicon from a tab-separated valence file.

    Multi-word entries extend the built-in idiom overrides.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        valences, file_idioms = parse_lexicon_lines(f, source=path)

    idioms = dict(IDIOMS)
    idioms.update(file_idioms)
    lexicon = Lexicon(valences, idioms=idioms)
    logger.info("Loaded %d lexicon entries and %d idioms from %s", len(lexicon), len(idioms), path)
    return lexicon


@lru_cache(maxsize=1)
def default_lexicon() -> Lexicon:
    """Return the process-wide lexicon, loading it on first use."""
    path = Path(config.LEXICON_PATH) if config.LEXICON_PATH else BUNDLED_LEXICON_PATH
    return load_lexicon(path)
