"""
Keyword tables used by the sentiment, speech and feedback processors.

Everything here is immutable. Processors take a ``Lexicon`` at construction,
so tests and callers can swap in their own tables.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

FILLER_WORDS: Tuple[str, ...] = (
    "um", "uh", "like", "you know", "so", "actually", "basically",
    "literally", "i mean", "sort of", "kind of", "i guess", "right",
)

TONE_INDICATORS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "confident": ("certainly", "definitely", "absolutely", "confident", "sure", "know"),
    "uncertain": ("maybe", "perhaps", "possibly", "might", "could be", "not sure", "guess"),
    "formal": ("therefore", "moreover", "consequently", "thus", "hence"),
    "casual": ("pretty", "cool", "stuff", "thing", "kinda", "sorta"),
})

HEDGING_PHRASES: Tuple[str, ...] = (
    "sort of", "kind of", "i guess", "maybe", "possibly", "probably",
    "somewhat", "i think", "i believe", "in my opinion",
)

PASSIVE_PHRASES: Tuple[str, ...] = (
    "was done", "were made", "has been", "have been",
    "was created", "were developed", "was implemented",
)

# Checked in order, first hit wins. Plain substring matches.
EMOTION_MARKERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("anxious", ("anxious", "nervous", "worried", "stress", "afraid")),
    ("confused", ("confused", "not sure", "don't understand", "difficult to", "unclear")),
    ("confident", ("confident", "certain", "definitely", "absolutely", "i know")),
)

MOOD_MARKERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("anxious", ("nervous", "anxious", "worry")),
    ("confused", ("confus", "not sure", "unclear")),
    ("happy", ("happy", "excite", "look forward")),
    ("confident", ("confident", "certain", "sure")),
    ("uncertain", ("uncertain", "maybe", "probably")),
)

NEGATORS: Tuple[str, ...] = (
    "not", "no", "never", "don't", "dont", "doesn't", "doesnt", "didn't", "didnt",
    "isn't", "isnt", "wasn't", "wasnt", "aren't", "arent", "can't", "cant",
    "cannot", "won't", "wont", "wouldn't", "wouldnt", "shouldn't", "shouldnt",
)


@dataclass(frozen=True)
class Lexicon:
    filler_words: Tuple[str, ...] = FILLER_WORDS
    tone_indicators: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: TONE_INDICATORS)
    hedging_phrases: Tuple[str, ...] = HEDGING_PHRASES
    passive_phrases: Tuple[str, ...] = PASSIVE_PHRASES
    emotion_markers: Tuple[Tuple[str, Tuple[str, ...]], ...] = EMOTION_MARKERS
    mood_markers: Tuple[Tuple[str, Tuple[str, ...]], ...] = MOOD_MARKERS
    negators: Tuple[str, ...] = NEGATORS


DEFAULT_LEXICON = Lexicon()
