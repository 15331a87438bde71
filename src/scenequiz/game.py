import asyncio
import logging
from typing import List, Optional

from .errors import GENERIC_ERROR_MESSAGE, EmptyRound, GenerationFailed
from .models import AnswerRecord, GameView, Phase, RoundContent
from .provider import ContentProvider

logger = logging.getLogger(__name__)

RESTARTABLE = (Phase.START, Phase.ERROR, Phase.GAME_OVER)


class GameController:
    """
    Owns one player's session state and the transitions between phases.

    Only start() suspends: it schedules the provider call on the running loop
    and returns at once with the phase set to LOADING. Each start() bumps a
    generation counter, and a completion whose generation is no longer current
    is dropped, so an older request can never overwrite a newer one.
    """

    def __init__(self, provider: ContentProvider):
        self.provider = provider
        self._phase = Phase.START
        self._round: Optional[RoundContent] = None
        self._question_index = 0
        self._score = 0
        self._last_judgment_correct: Optional[bool] = None
        self._error_message: Optional[str] = None
        self._answers: List[AnswerRecord] = []
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    # --- Read accessors ---
    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def round(self) -> Optional[RoundContent]:
        return self._round

    @property
    def question_index(self) -> int:
        return self._question_index

    @property
    def score(self) -> int:
        return self._score

    @property
    def last_judgment_correct(self) -> Optional[bool]:
        return self._last_judgment_correct

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    @property
    def answers(self) -> List[AnswerRecord]:
        return list(self._answers)

    @property
    def total_questions(self) -> int:
        return len(self._round.sentences) if self._round else 0

    @property
    def is_last_question(self) -> bool:
        return self._round is not None and (
            self._question_index == self.total_questions - 1
        )

    # --- Transitions ---
    def start(self, restart: bool = False) -> Optional[asyncio.Task]:
        """
        Begins loading a fresh round. Accepted from START, ERROR and GAME_OVER;
        restart=True also abandons a round in progress (the page's "New Picture"
        button), leaving any in-flight request to be dropped as stale.
        """
        if self._phase not in RESTARTABLE and not restart:
            logger.debug(f"Ignoring start() in phase {self._phase.value}")
            return None

        self._round = None
        self._question_index = 0
        self._score = 0
        self._last_judgment_correct = None
        self._error_message = None
        self._answers = []
        self._phase = Phase.LOADING
        self._generation += 1

        self._task = asyncio.get_running_loop().create_task(
            self._load(self._generation)
        )
        return self._task

    async def _load(self, generation: int):
        try:
            content = await self.provider.request_round()
            if not content.sentences:
                raise EmptyRound()
        except GenerationFailed as e:
            self._fail(generation, e.message)
            return
        except Exception:
            logger.exception("Unexpected error while loading a round")
            self._fail(generation, GENERIC_ERROR_MESSAGE)
            return

        if generation != self._generation:
            logger.info(f"Discarding stale round from generation {generation}")
            return
        self._round = content
        self._phase = Phase.PLAYING
        logger.info(f"Round {generation} started with {len(content.sentences)} questions")

    def _fail(self, generation: int, message: Optional[str]):
        if generation != self._generation:
            logger.info(f"Discarding stale failure from generation {generation}")
            return
        logger.warning(f"Round {generation} failed: {message}")
        self._round = None
        self._error_message = message or GENERIC_ERROR_MESSAGE
        self._phase = Phase.ERROR

    def submit_answer(self, user_choice: bool) -> bool:
        """Records one judgment. Returns False when no judgment is allowed now."""
        if self._phase != Phase.PLAYING or self._round is None:
            return False

        item = self._round.sentences[self._question_index]
        is_user_correct = user_choice == item.is_correct
        self._last_judgment_correct = is_user_correct
        if is_user_correct:
            self._score += 1
        self._answers.append(
            AnswerRecord(
                sentence=item.sentence,
                user_choice=user_choice,
                correct_answer=item.is_correct,
                is_correct=is_user_correct,
            )
        )
        self._phase = Phase.SHOW_RESULT
        return True

    def advance(self) -> bool:
        if self._phase != Phase.SHOW_RESULT or self._round is None:
            return False

        self._last_judgment_correct = None
        if self._question_index < self.total_questions - 1:
            self._question_index += 1
            self._phase = Phase.PLAYING
        else:
            self._phase = Phase.GAME_OVER
            logger.info(f"Round finished: {self._score}/{self.total_questions}")
        return True

    def snapshot(self) -> GameView:
        total = self.total_questions
        view = GameView(
            phase=self._phase,
            score=self._score,
            total_questions=total,
            score_percentage=round((self._score / total) * 100) if total > 0 else 0,
            last_judgment_correct=self._last_judgment_correct,
            error_message=self._error_message,
            answers=self.answers,
        )
        if self._round is not None:
            view.image = self._round.image
            view.sentence = self._round.sentences[self._question_index].sentence
            view.question_number = self._question_index + 1
            view.is_last_question = self.is_last_question
        return view
