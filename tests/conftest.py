import asyncio
from typing import List

import pytest

from scenequiz.models import RoundContent, SentenceItem
from scenequiz.provider import ContentProvider

IMAGE = "data:image/png;base64,aGVsbG8="


def make_round(*pairs) -> RoundContent:
    return RoundContent(
        image=IMAGE,
        sentences=[SentenceItem(sentence=s, is_correct=c) for s, c in pairs],
    )


class ScriptedProvider(ContentProvider):
    """Returns (or raises) its outcomes in order, one per call."""

    def __init__(self, *outcomes):
        self.outcomes: List = list(outcomes)
        self.calls = 0

    async def request_round(self) -> RoundContent:
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class GatedProvider(ContentProvider):
    """Each call blocks until the test opens its gate."""

    def __init__(self, *outcomes):
        self.outcomes: List = list(outcomes)
        self.gates: List[asyncio.Event] = []

    async def request_round(self) -> RoundContent:
        gate = asyncio.Event()
        outcome = self.outcomes[len(self.gates)]
        self.gates.append(gate)
        await gate.wait()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def two_question_round() -> RoundContent:
    return make_round(("There is a dog", True), ("There are three apples", False))
