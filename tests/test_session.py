"""
Unit tests for the session controller and tick timer.
"""

import random

import pytest
from quiz_snake.snake import Direction
from quiz_snake.questions import Subject, Difficulty
from quiz_snake.placement import AnswerItem
from quiz_snake.engine import TickOutcome, GameOverReason
from quiz_snake.timer import TickTimer
from quiz_snake.session import SessionController, GameSnapshot
from quiz_snake.config import load_config


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTickTimer:
    def setup_method(self):
        self.clock = FakeClock()
        self.timer = TickTimer(period_ms=100, clock=self.clock)

    def test_inactive_before_start(self):
        assert not self.timer.active
        assert self.timer.due() == 0

    def test_due_fires_once_per_period(self):
        self.timer.start()
        self.clock.now = 0.05
        assert self.timer.due() == 0
        self.clock.now = 0.15
        assert self.timer.due() == 1
        self.clock.now = 0.17
        assert self.timer.due() == 0
        self.clock.now = 0.35
        assert self.timer.due() == 1

    def test_stall_drops_missed_ticks(self):
        self.timer.start()
        self.clock.now = 2.0
        assert self.timer.due() == 1
        assert self.timer.due() == 0
        self.clock.now = 2.05
        assert self.timer.due() == 0
        self.clock.now = 2.11
        assert self.timer.due() == 1

    def test_cancel_is_idempotent(self):
        self.timer.start()
        assert self.timer.cancel() is True
        assert self.timer.cancel() is False
        assert not self.timer.active
        self.clock.now = 10.0
        assert self.timer.due() == 0

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            TickTimer(period_ms=0)


class TestSessionStart:
    def setup_method(self):
        self.controller = SessionController(rng=random.Random(1), clock=FakeClock())

    def test_no_session_before_start(self):
        assert self.controller.snapshot() is None
        assert not self.controller.running
        assert self.controller.score == 0

    def test_start_state(self):
        snapshot = self.controller.start("math", "easy")
        assert isinstance(snapshot, GameSnapshot)
        assert snapshot.snake == ((5, 5),)
        assert snapshot.direction == Direction.RIGHT
        assert snapshot.score == 0
        assert snapshot.running is True
        assert snapshot.subject == Subject.MATH
        assert snapshot.difficulty == Difficulty.EASY
        assert snapshot.prompt
        assert len(snapshot.items) == 3
        assert sum(1 for i in snapshot.items if i.correct) == 1
        assert all(i.position != (5, 5) for i in snapshot.items)
        assert self.controller.timer.active

    def test_start_uses_defaults(self):
        controller = SessionController(
            rng=random.Random(1), clock=FakeClock(),
            subject="vocabulary", difficulty="hard",
        )
        snapshot = controller.start()
        assert snapshot.subject == Subject.VOCABULARY
        assert snapshot.difficulty == Difficulty.HARD

    def test_start_rejects_unknown_subject(self):
        with pytest.raises(ValueError):
            self.controller.start("history", "easy")

    def test_restart_resets_session(self):
        self.controller.start()
        self.controller.session.score = 7
        snapshot = self.controller.start()
        assert snapshot.score == 0
        assert snapshot.snake == ((5, 5),)

    def test_from_config(self):
        config = load_config(overrides={"game": {"grid_size": 12, "seed": 3,
                                                 "subject": "english"}})
        controller = SessionController.from_config(config, clock=FakeClock())
        snapshot = controller.start()
        assert controller.grid_size == 12
        assert snapshot.snake == ((6, 6),)
        assert snapshot.subject == Subject.VOCABULARY

    def test_snapshot_is_detached(self):
        self.controller.start()
        snapshot = self.controller.snapshot()
        self.controller.session.items = []
        self.controller.tick()
        assert snapshot.snake == ((5, 5),)
        assert len(snapshot.items) == 3


class TestDirectionRequests:
    def setup_method(self):
        self.controller = SessionController(rng=random.Random(2), clock=FakeClock())
        self.controller.start()
        self.controller.session.items = []

    def test_reverse_rejected(self):
        assert self.controller.request_direction(Direction.LEFT) is False
        assert self.controller.session.pending_direction == Direction.RIGHT

    def test_turn_only_updates_pending(self):
        assert self.controller.request_direction(Direction.UP) is True
        assert self.controller.session.pending_direction == Direction.UP
        assert self.controller.session.direction == Direction.RIGHT

    def test_vector_requests(self):
        assert self.controller.request_direction((0, 1)) is True
        assert self.controller.session.pending_direction == Direction.DOWN

    def test_reversal_checked_against_current(self):
        # UP then LEFT within one tick: LEFT still reverses the current RIGHT
        self.controller.request_direction(Direction.UP)
        assert self.controller.request_direction(Direction.LEFT) is False
        assert self.controller.session.pending_direction == Direction.UP

    def test_turn_applies_on_next_tick(self):
        self.controller.request_direction(Direction.DOWN)
        self.controller.tick()
        assert self.controller.snapshot().head == (5, 6)
        # Now LEFT is a legal turn, UP is the reverse
        assert self.controller.request_direction(Direction.UP) is False
        assert self.controller.request_direction(Direction.LEFT) is True

    def test_ignored_without_game(self):
        controller = SessionController(rng=random.Random(2))
        assert controller.request_direction(Direction.UP) is False


class TestTicks:
    def setup_method(self):
        self.clock = FakeClock()
        self.controller = SessionController(
            tick_ms=100, rng=random.Random(4), clock=self.clock
        )
        self.updates = []
        self.game_overs = []
        self.controller.add_listener(
            on_update=self.updates.append,
            on_game_over=lambda score, reason: self.game_overs.append((score, reason)),
        )
        self.controller.start()
        self.controller.session.items = []

    def test_tick_without_session(self):
        with pytest.raises(RuntimeError):
            SessionController().tick()

    def test_updates_notified(self):
        n = len(self.updates)
        self.controller.tick()
        assert len(self.updates) == n + 1
        assert self.updates[-1].head == (6, 5)

    def test_wall_game_over_reported_once(self):
        results = [self.controller.tick() for _ in range(5)]
        assert [r.outcome for r in results[:4]] == [TickOutcome.MOVED] * 4
        assert results[4].reason == GameOverReason.WALL
        assert self.game_overs == [(0, GameOverReason.WALL)]
        assert not self.controller.timer.active
        assert not self.controller.running

        again = self.controller.tick()
        assert again.outcome == TickOutcome.GAME_OVER
        assert self.game_overs == [(0, GameOverReason.WALL)]

    def test_final_snapshot_marks_end(self):
        for _ in range(5):
            self.controller.tick()
        snapshot = self.controller.snapshot()
        assert snapshot.running is False
        assert snapshot.game_over_reason == GameOverReason.WALL
        assert self.updates[-1].running is False

    def test_correct_answer_through_controller(self):
        self.controller.session.items = [
            AnswerItem(6, 5, 4, True),
            AnswerItem(0, 0, 3, False),
            AnswerItem(0, 1, 5, False),
        ]
        result = self.controller.tick()
        assert result.outcome == TickOutcome.ATE_CORRECT
        snapshot = self.controller.snapshot()
        assert snapshot.score == 1
        assert snapshot.length == 2
        assert len(snapshot.items) == 3
        assert sum(1 for i in snapshot.items if i.correct) == 1

    def test_wrong_answer_reports_score(self):
        self.controller.session.score = 3
        self.controller.session.items = [AnswerItem(6, 5, 9, False)]
        self.controller.tick()
        assert self.game_overs == [(3, GameOverReason.WRONG_ANSWER)]

    def test_advance_runs_due_ticks(self):
        self.clock.now = 0.05
        assert self.controller.advance() == 0
        self.clock.now = 0.15
        assert self.controller.advance() == 1
        self.clock.now = 0.35
        assert self.controller.advance() == 1
        assert self.controller.snapshot().head == (7, 5)

    def test_advance_after_stall_runs_one_tick(self):
        self.clock.now = 2.0
        assert self.controller.advance() == 1
        assert self.controller.snapshot().head == (6, 5)
        assert self.controller.running
        assert self.controller.request_direction(Direction.UP) is True
        assert self.controller.advance() == 0

        self.clock.now = 2.11
        assert self.controller.advance() == 1
        assert self.controller.snapshot().head == (6, 4)
        assert self.game_overs == []

    def test_advance_stops_at_game_over(self):
        for step in range(1, 6):
            self.clock.now = step * 0.1 + 0.001
            assert self.controller.advance() == 1
        assert not self.controller.running
        self.clock.now = 5.0
        assert self.controller.advance() == 0
        assert len(self.game_overs) == 1

    def test_stop_is_idempotent(self):
        self.controller.stop()
        self.controller.stop()
        assert self.controller.snapshot() is None
        assert not self.controller.running
        assert not self.controller.timer.active
        assert self.game_overs == []
