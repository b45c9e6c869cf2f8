"""
Conversational feedback for a single spoken answer.

Sentences are picked at random from small pools of paraphrases so repeated
answers do not get identical advice. Pass a seeded ``random.Random`` to make
the selection reproducible.
"""
import random
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

import structlog

from .lexicon import DEFAULT_LEXICON, Lexicon
from .speech import SpeechAnalysisResult

logger = structlog.get_logger(__name__)

PACE_TEMPLATES = {
    "too_fast": (
        "Your speaking pace is quite fast at {wpm} words per minute. Slowing down will make you sound more confident and give your interviewer time to follow.",
        "You're speaking at {wpm} words per minute, which is on the fast side. A few deliberate pauses will help you control your pace.",
        "I noticed you're speaking quickly ({wpm} wpm). Speaking slowly and deliberately conveys confidence and expertise.",
    ),
    "too_slow": (
        "Your speaking pace is {wpm} words per minute, which is a bit measured. Try to be more concise and keep your energy up.",
        "You're speaking at {wpm} words per minute. Being thoughtful is good, but a more direct delivery keeps the interviewer engaged.",
        "Your pace is somewhat slow at {wpm} wpm. Aim for a moderate pace that shows both thoughtfulness and energy.",
    ),
    "good": (
        "Your speaking pace is excellent at {wpm} words per minute, clear and easy to follow.",
        "Great job keeping an ideal speaking pace of {wpm} words per minute. Your answers are easy to digest.",
        "You have a well-balanced speaking rate of {wpm} wpm, which sounds natural and professional.",
    ),
}

FILLER_TEMPLATES = {
    "high": (
        "I noticed {count} filler words like \"{examples}\" in your response. Try replacing them with short pauses.",
        "Your answer contained {count} fillers such as \"{examples}\". They can make you sound less sure of yourself, so pause silently when you need a moment.",
        "There were {count} filler words (\"{examples}\") in your response. Cutting these will make your answer sound more polished.",
    ),
    "medium": (
        "You used a few filler words ({count}) like \"{examples}\". Noticing them is the first step to dropping them.",
        "I detected {count} fillers such as \"{examples}\". Keep these to a minimum for a more polished delivery.",
        "Your response had {count} filler expressions like \"{examples}\". Practice pausing instead.",
    ),
    "low": (
        "Great job keeping filler words to a minimum with just {count} instances.",
        "You used very few filler words ({count}), which makes your response sound prepared.",
        "Good control of your speech with only {count} filler words.",
    ),
    "none": (
        "Fantastic job avoiding filler words completely in your response!",
        "Your answer was free of filler words, which keeps it clean and professional.",
        "No filler words detected in your response. Impressive.",
    ),
}

EMOTION_TEMPLATES = {
    "anxious": (
        "You're coming across as somewhat anxious. Take a deep breath before answering; interviewers expect some nerves.",
        "I'm picking up some anxiety in your tone. Try a slow breath in and out before your next response.",
        "There's a hint of nervousness in your voice. Speaking a little more slowly can help you appear calmer.",
    ),
    "nervous": (
        "I can hear some nervousness in your tone. That's completely normal in an interview.",
        "You sound a bit nervous, which is understandable. A slightly lower, steadier voice conveys more confidence.",
        "Your voice shows some nervousness. Grounding yourself before you speak can help.",
    ),
    "confused": (
        "You seem unsure about this topic. It's perfectly fine to ask for clarification.",
        "Your response suggests some confusion. Asking a clarifying question beats guessing at what was meant.",
        "I'm detecting some uncertainty. Saying you'd need to look into something is better than a confused answer.",
    ),
    "uncertain": (
        "You're using language that sounds uncertain (maybe, perhaps, I think). Make more definitive statements about your experience.",
        "Your tone suggests some hesitation. Where you have expertise, say so plainly.",
        "I notice some tentative phrasing. State facts directly instead of qualifying them.",
    ),
    "confident": (
        "You sound confident and self-assured. Excellent job projecting expertise.",
        "Great job conveying confidence in your response. That leaves a strong impression.",
        "Your confident tone makes your answer more credible. Well done!",
    ),
    "happy": (
        "Your enthusiasm comes through nicely. Positive energy works well in interviews.",
        "I can hear genuine interest in your voice. Showing passion for the topic is always a plus.",
        "The positive tone of your response shows real engagement with the topic.",
    ),
    "neutral": (
        "Your tone is professional and measured. A bit more enthusiasm could help on some questions.",
        "You have a calm, neutral tone. Varying it slightly can help emphasize key points.",
        "Your response has a balanced, professional tone. Don't be afraid to show enthusiasm where it fits.",
    ),
}

PAUSE_TEMPLATES = {
    "too_few": (
        "Try adding a few strategic pauses. They give the interviewer time to absorb your points and make you look thoughtful.",
        "Your answer could use some well-placed pauses. Pauses aren't awkward; they show you're thinking.",
        "Add brief pauses between key points so your important statements carry more weight.",
    ),
    "good": (
        "Great use of pauses to emphasize your key points.",
        "You're using pauses well to structure your response, which makes it easy to follow.",
        "Well-timed pauses give weight to your main points.",
    ),
}

LINGUISTIC_TEMPLATES = {
    "hedging": (
        "Try to cut hedging phrases like \"sort of\", \"kind of\" or \"I guess\". Be direct and assertive in your claims.",
        "Some hedging language is undermining your expertise. Swap tentative phrases for definitive statements.",
        "Drop qualifiers like \"maybe\" or \"possibly\" when you talk about your achievements.",
    ),
    "passive_voice": (
        "Active voice makes achievements sound more impactful. Instead of \"The project was completed by me\", say \"I completed the project\".",
        "Replace passive constructions with active ones to highlight your direct involvement.",
        "Active voice sounds more confident. Make yourself the subject taking action.",
    ),
}

TEMPLATES: Mapping[str, Mapping[str, Sequence[str]]] = MappingProxyType({
    "pace": PACE_TEMPLATES,
    "filler": FILLER_TEMPLATES,
    "emotion": EMOTION_TEMPLATES,
    "pause": PAUSE_TEMPLATES,
    "linguistic": LINGUISTIC_TEMPLATES,
})


def filler_bucket(count: int) -> str:
    if count == 0:
        return "none"
    if count <= 2:
        return "low"
    if count <= 5:
        return "medium"
    return "high"


class FeedbackSynthesizer:
    def __init__(self,
                 lexicon: Lexicon = DEFAULT_LEXICON,
                 rng: Optional[random.Random] = None,
                 max_items: int = 3):
        self.lexicon = lexicon
        self.rng = rng or random.Random()
        self.max_items = max_items

    def _pick(self, templates: Sequence[str]) -> str:
        return templates[self.rng.randrange(len(templates))]

    def synthesize(self, analysis: SpeechAnalysisResult) -> List[str]:
        feedback: List[str] = []
        transcript = analysis.transcript

        if analysis.pace is not None:
            template = self._pick(PACE_TEMPLATES[analysis.pace.status])
            feedback.append(template.replace("{wpm}", str(round(analysis.pace.words_per_minute))))

        fillers = analysis.filler_words
        bucket = filler_bucket(fillers.count)
        template = self._pick(FILLER_TEMPLATES[bucket])
        if bucket != "none":
            template = (template
                        .replace("{count}", str(fillers.count))
                        .replace("{examples}", '", "'.join(fillers.instances[:3])))
        feedback.append(template)

        if analysis.sentiment in EMOTION_TEMPLATES:
            feedback.append(self._pick(EMOTION_TEMPLATES[analysis.sentiment]))

        word_count = len(transcript.split())
        if word_count > 40 and analysis.pauses < 3:
            feedback.append(self._pick(PAUSE_TEMPLATES["too_few"]))
        elif analysis.pauses >= 3:
            # Praise is only given half the time
            if self.rng.random() > 0.5:
                feedback.append(self._pick(PAUSE_TEMPLATES["good"]))

        lowered = transcript.lower()
        if any(phrase in lowered for phrase in self.lexicon.hedging_phrases):
            feedback.append(self._pick(LINGUISTIC_TEMPLATES["hedging"]))
        if any(phrase in lowered for phrase in self.lexicon.passive_phrases):
            feedback.append(self._pick(LINGUISTIC_TEMPLATES["passive_voice"]))

        if len(feedback) > self.max_items:
            self.rng.shuffle(feedback)
            feedback = feedback[:self.max_items]

        logger.debug("feedback_synthesized", items=len(feedback), filler_bucket=bucket)
        return feedback


def all_templates() -> Dict[str, List[str]]:
    """Every template per category, placeholders left in place."""
    return {
        category: [t for pool in buckets.values() for t in pool]
        for category, buckets in TEMPLATES.items()
    }
