# tests/test_feedback_synthesizer.py
import random
import re

import pytest

from interview_feedback.processors.feedback import (
    FILLER_TEMPLATES,
    LINGUISTIC_TEMPLATES,
    PACE_TEMPLATES,
    PAUSE_TEMPLATES,
    FeedbackSynthesizer,
    all_templates,
    filler_bucket,
)
from interview_feedback.processors.speech import FillerWordMatches, PaceMetrics, SpeechAnalysisResult


class FixedRandom(random.Random):
    """Random whose ``random()`` always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def template_pattern(template):
    pattern = re.escape(template)
    pattern = pattern.replace(r"\{wpm\}", r"\d+").replace(r"\{count\}", r"\d+")
    return re.compile(pattern.replace(r"\{examples\}", ".*"))


def is_known(item, templates):
    return any(template_pattern(t).fullmatch(item) for t in templates)


ALL_TEMPLATES = [t for pool in all_templates().values() for t in pool]


def analysis(transcript="I built the service.", pace=None, fillers=None, sentiment="sad", pauses=0):
    return SpeechAnalysisResult(
        filler_words=fillers or FillerWordMatches(),
        pace=pace,
        pauses=pauses,
        sentiment=sentiment,
        word_count=len(transcript.split()),
        feedback=[],
        transcript=transcript,
    )


@pytest.mark.parametrize("count, bucket", [(0, "none"), (1, "low"), (2, "low"),
                                           (3, "medium"), (5, "medium"), (6, "high")])
def test_filler_bucket(count, bucket):
    assert filler_bucket(count) == bucket


def test_pace_and_filler_items():
    synthesizer = FeedbackSynthesizer(rng=random.Random(3))
    items = synthesizer.synthesize(analysis(pace=PaceMetrics(words_per_minute=150.0, status="good")))

    assert len(items) == 2
    assert items[0] in [t.replace("{wpm}", "150") for t in PACE_TEMPLATES["good"]]
    assert items[1] in FILLER_TEMPLATES["none"]


def test_no_pace_item_when_pace_undefined():
    items = FeedbackSynthesizer(rng=random.Random(3)).synthesize(analysis())
    assert len(items) == 1
    assert items[0] in FILLER_TEMPLATES["none"]


def test_filler_placeholders_filled():
    fillers = FillerWordMatches(count=3, instances=["um", "like", "so"],
                                details={"um": 1, "like": 1, "so": 1})
    items = FeedbackSynthesizer(rng=random.Random(5)).synthesize(analysis(fillers=fillers))

    assert is_known(items[0], FILLER_TEMPLATES["medium"])
    assert "{" not in items[0]
    assert "3" in items[0]


def test_hedging_detected():
    items = FeedbackSynthesizer(rng=random.Random(1)).synthesize(analysis(
        transcript="I guess it went fine",
        pace=PaceMetrics(words_per_minute=140.0, status="good"),
    ))

    assert len(items) == 3
    assert items[2] in LINGUISTIC_TEMPLATES["hedging"]


def test_pause_praise_when_coin_flip_passes():
    result = analysis(transcript="One. Two. Three. Four", pauses=3)

    praised = FeedbackSynthesizer(rng=FixedRandom(0.9)).synthesize(result)
    plain = FeedbackSynthesizer(rng=FixedRandom(0.1)).synthesize(result)

    assert len(praised) == 2
    assert praised[1] in PAUSE_TEMPLATES["good"]
    assert len(plain) == 1


def test_long_answer_without_pauses():
    transcript = " ".join(["word"] * 41)
    items = FeedbackSynthesizer(rng=random.Random(2)).synthesize(analysis(transcript=transcript))

    assert items[-1] in PAUSE_TEMPLATES["too_few"]


def busy_analysis():
    return analysis(
        transcript="Maybe the module was implemented quickly",
        pace=PaceMetrics(words_per_minute=200.0, status="too_fast"),
        fillers=FillerWordMatches(count=4, instances=["um", "so", "like", "um"]),
        sentiment="anxious",
    )


def test_output_capped_and_drawn_from_templates():
    items = FeedbackSynthesizer(rng=random.Random(11)).synthesize(busy_analysis())

    assert len(items) == 3
    assert len(set(items)) == 3
    for item in items:
        assert is_known(item, ALL_TEMPLATES)


def test_custom_item_limit():
    items = FeedbackSynthesizer(rng=random.Random(11), max_items=2).synthesize(busy_analysis())
    assert len(items) == 2


def test_same_seed_same_feedback():
    first = FeedbackSynthesizer(rng=random.Random(42)).synthesize(busy_analysis())
    second = FeedbackSynthesizer(rng=random.Random(42)).synthesize(busy_analysis())
    assert first == second


def test_all_templates_has_every_category():
    templates = all_templates()
    assert set(templates) == {"pace", "filler", "emotion", "pause", "linguistic"}
    assert len(templates["pace"]) == 9
