"""Caller-side driver for one pass over a study working set.

Nothing here is persisted: abandoning a session leaves only the answers that
were already recorded through :class:`StudyService`.
"""

import math
import time
from collections.abc import Callable, Sequence
from enum import Enum

from core.exceptions import ValidationError
from models.flashcard import Flashcard
from services.study_service import StudyService, accuracy


class SessionState(str, Enum):
    PRESENTING = "presenting"
    ANSWER_REVEALED = "answer_revealed"
    COMPLETE = "complete"


class StudySession:
    def __init__(
        self,
        tracker: StudyService,
        owner_id: int | None,
        cards: Sequence[Flashcard],
        clock: Callable[[], float] = time.monotonic,
    ):
        self.tracker = tracker
        self.owner_id = owner_id
        self.cards = list(cards)
        self.clock = clock
        self.index = 0
        self.correct = 0
        self.incorrect = 0
        self._card_started = clock()
        self.state = SessionState.PRESENTING if self.cards else SessionState.COMPLETE

    @property
    def current_card(self) -> Flashcard | None:
        if self.state is SessionState.COMPLETE:
            return None
        return self.cards[self.index]

    @property
    def remaining(self) -> int:
        return len(self.cards) - self.index

    @property
    def accuracy(self) -> int:
        return accuracy(self.correct, self.correct + self.incorrect)

    def reveal(self) -> Flashcard:
        if self.state is not SessionState.PRESENTING:
            raise ValidationError(f"Cannot reveal an answer while {self.state.value}")
        self.state = SessionState.ANSWER_REVEALED
        return self.cards[self.index]

    def answer(self, was_correct: bool) -> SessionState:
        """Record the outcome for the current card and move on.

        The session only advances once the tracker has stored the answer; a
        failure leaves it on the same card with the answer still revealed.
        """
        if self.state is not SessionState.ANSWER_REVEALED:
            raise ValidationError("Reveal the answer before grading it")

        card = self.cards[self.index]
        time_spent = max(0, math.floor(self.clock() - self._card_started))
        self.tracker.record_answer(
            owner_id=self.owner_id,
            flashcard_id=card.id,
            was_correct=was_correct,
            time_spent=time_spent,
        )

        if was_correct:
            self.correct += 1
        else:
            self.incorrect += 1

        self.index += 1
        if self.index >= len(self.cards):
            self.state = SessionState.COMPLETE
        else:
            self.state = SessionState.PRESENTING
            self._card_started = self.clock()
        return self.state
