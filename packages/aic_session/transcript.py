from typing import Iterable

from .dto import Answer

ANSWER_TEMPLATE = "Question: {question}\nAnswer: {answer}"
ANSWER_SEPARATOR = "\n\n"


def build_transcript(answers: Iterable[Answer]) -> str:
    """Concatenate every Q/A pair in question order, separated by a blank line."""
    return ANSWER_SEPARATOR.join(
        ANSWER_TEMPLATE.format(question=a.question, answer=a.answer_text)
        for a in answers
    )
