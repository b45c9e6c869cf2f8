"""
Turns a finished interview transcript into question/answer pairs and lines
them up with the sentiment samples recorded during the call.
"""
import re
from typing import Iterable, List, Sequence

from ..application.schemas import (
    QuestionAnswerPair,
    SentimentSample,
    SentimentScore,
    TranscriptRole,
    TranscriptTurn,
)

_QUESTION_OPENERS = re.compile(
    r"^(what|how|why|can you|could you|tell me|describe|explain)", re.IGNORECASE
)


def is_question(text: str) -> bool:
    text = text.strip()
    return text.endswith("?") or bool(_QUESTION_OPENERS.match(text))


def segment_transcript(turns: Sequence[TranscriptTurn]) -> List[QuestionAnswerPair]:
    """
    Pair every interviewer question with the candidate turn right after it.

    Only the next turn is considered. If it is missing or not a candidate
    turn, the question is kept with an empty answer.
    """
    pairs: List[QuestionAnswerPair] = []
    for i, turn in enumerate(turns):
        if turn.role != TranscriptRole.INTERVIEWER or not is_question(turn.content):
            continue
        answer = ""
        if i + 1 < len(turns) and turns[i + 1].role == TranscriptRole.CANDIDATE:
            answer = turns[i + 1].content.strip()
        pairs.append(QuestionAnswerPair(question=turn.content.strip(), answer=answer))
    return pairs


def format_transcript(turns: Iterable[TranscriptTurn]) -> str:
    return "".join(f"- {turn.role.value}: {turn.content}\n" for turn in turns)


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


def attach_sentiment(pairs: Sequence[QuestionAnswerPair],
                     samples: Sequence[SentimentSample]) -> List[QuestionAnswerPair]:
    """
    Give each answer the first sample whose transcript overlaps it.

    Overlap means either text contains the other, after lowercasing and
    collapsing whitespace. Samples are scanned in recorded order.
    """
    if not samples:
        return [pair.model_copy() for pair in pairs]

    normalized = [(_normalize(sample.transcript), sample) for sample in samples]
    attached: List[QuestionAnswerPair] = []
    for pair in pairs:
        answer = _normalize(pair.answer)
        match = None
        if answer:
            match = next(
                (sample for text, sample in normalized
                 if text and (answer in text or text in answer)),
                None,
            )
        if match is None:
            attached.append(pair.model_copy())
            continue
        attached.append(pair.model_copy(update={
            "sentiment_score": SentimentScore(
                score=match.score,
                emotion=match.emotion,
                confidence=match.confidence,
            )
        }))
    return attached
