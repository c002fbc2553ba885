"""
Module with question generation (math and vocabulary).
"""

from enum import Enum
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
import random

from .words import (
    WORD_LISTS, TRANSLATIONS, VOCABULARY_PROMPT, LETTERS, missing_translations
)


ANSWERS_PER_QUESTION = 3


class Subject(Enum):
    """Quiz domains."""
    MATH = "math"
    VOCABULARY = "vocabulary"

    @classmethod
    def parse(cls, value: Union["Subject", str]) -> "Subject":
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name == "english":  # label used by the original menu
            return cls.VOCABULARY
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"Unknown subject {value!r}, expected one of "
                f"{[s.value for s in cls]}"
            ) from None


class Difficulty(Enum):
    """Difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union["Difficulty", str]) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown difficulty {value!r}, expected one of "
                f"{[d.value for d in cls]}"
            ) from None


@dataclass(frozen=True)
class AnswerOption:
    """A candidate answer before it is placed on the board."""
    value: Union[int, str]
    correct: bool

    @property
    def display(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Question:
    """Prompt plus its candidate answers. Never mutated; replaced instead."""
    prompt: str
    answers: Tuple[AnswerOption, ...]
    subject: Subject
    difficulty: Difficulty

    @property
    def correct_answer(self) -> AnswerOption:
        return next(a for a in self.answers if a.correct)

    @property
    def wrong_answers(self) -> Tuple[AnswerOption, ...]:
        return tuple(a for a in self.answers if not a.correct)

    def validate(self) -> "Question":
        """Raises ValueError if the answer set is malformed."""
        if len(self.answers) != ANSWERS_PER_QUESTION:
            raise ValueError(
                f"expected {ANSWERS_PER_QUESTION} answers, got {len(self.answers)}"
            )
        n_correct = sum(1 for a in self.answers if a.correct)
        if n_correct != 1:
            raise ValueError(f"expected exactly one correct answer, got {n_correct}")
        if len({a.display for a in self.answers}) != len(self.answers):
            raise ValueError(f"duplicate answers in {self.answers}")
        return self


class QuestionGenerator:
    """
    Produces questions for a subject and difficulty.

    All randomness comes from the injected rng, so a seeded
    random.Random gives a reproducible question sequence.
    """

    WRONG_SPREAD = 2

    def __init__(self, rng: Optional[random.Random] = None,
                 max_mutation_attempts: int = 100):
        """
        Args:
            rng: random source (default: unseeded random.Random)
            max_mutation_attempts: random misspelling attempts before the
                deterministic fallback kicks in
        """
        self.rng = rng if rng is not None else random.Random()
        self.max_mutation_attempts = max_mutation_attempts

        missing = missing_translations()
        if missing:
            raise ValueError(f"Words without translation: {missing}")

    def generate(self, subject: Union[Subject, str],
                 difficulty: Union[Difficulty, str]) -> Question:
        subject = Subject.parse(subject)
        difficulty = Difficulty.parse(difficulty)

        if subject == Subject.MATH:
            question = self.generate_math(difficulty)
        else:
            question = self.generate_vocabulary(difficulty)
        return question.validate()

    # ------------------------------------------------------------------
    # Math
    # ------------------------------------------------------------------

    def generate_math(self, difficulty: Difficulty) -> Question:
        prompt, answer = self._math_problem(difficulty)
        wrongs = self.wrong_numbers(answer)

        answers = [AnswerOption(answer, True)]
        answers += [AnswerOption(w, False) for w in wrongs]
        self.rng.shuffle(answers)

        return Question(prompt, tuple(answers), Subject.MATH, difficulty)

    def _math_problem(self, difficulty: Difficulty) -> Tuple[str, int]:
        """Returns (prompt, result) for the tier."""
        rng = self.rng

        if difficulty == Difficulty.EASY:
            if rng.random() < 0.5:
                a, b = rng.randint(1, 10), rng.randint(1, 10)
                return f"{a} + {b}", a + b
            a = rng.randint(1, 10)
            b = rng.randint(1, a)
            return f"{a} - {b}", a - b

        if difficulty == Difficulty.MEDIUM:
            op = rng.random()
            if op < 0.33:
                a, b = rng.randint(1, 20), rng.randint(1, 20)
                return f"{a} + {b}", a + b
            if op < 0.66:
                a = rng.randint(1, 20)
                b = rng.randint(1, a)
                return f"{a} - {b}", a - b
            a, b = rng.randint(1, 10), rng.randint(1, 10)
            return f"{a} × {b}", a * b

        # Hard: multiplication or exact division
        if rng.random() < 0.5:
            a, b = rng.randint(2, 12), rng.randint(2, 12)
            return f"{a} × {b}", a * b
        divisor = rng.randint(2, 12)
        multiplier = rng.randint(2, 12)
        return f"{divisor * multiplier} ÷ {divisor}", multiplier

    def wrong_numbers(self, correct: int, count: int = 2) -> List[int]:
        """
        Distinct non-negative values near correct, never equal to it.

        Samples from every candidate within correct +/- WRONG_SPREAD; the
        window widens only if it holds fewer than count candidates.
        """
        spread = self.WRONG_SPREAD
        while True:
            candidates = [
                correct + offset
                for offset in range(-spread, spread + 1)
                if offset != 0 and correct + offset >= 0
            ]
            if len(candidates) >= count:
                return self.rng.sample(candidates, count)
            spread += 1

    # ------------------------------------------------------------------
    # Vocabulary
    # ------------------------------------------------------------------

    def generate_vocabulary(self, difficulty: Difficulty) -> Question:
        words = WORD_LISTS[difficulty.value]
        word = self.rng.choice(words)
        translation = TRANSLATIONS[word]

        misspellings = self.misspellings(word)

        answers = [AnswerOption(word, True)]
        answers += [AnswerOption(m, False) for m in misspellings]
        self.rng.shuffle(answers)

        prompt = VOCABULARY_PROMPT.format(translation=translation)
        return Question(prompt, tuple(answers), Subject.VOCABULARY, difficulty)

    def misspellings(self, word: str, count: int = 2) -> List[str]:
        """Distinct mutations of word, none equal to word."""
        found: List[str] = []

        for _ in range(self.max_mutation_attempts):
            if len(found) == count:
                return found
            mutated = self.mutate_word(word)
            if mutated != word and mutated not in found:
                found.append(mutated)

        # Walk single-letter substitutions in order
        for idx in range(len(word)):
            for letter in LETTERS:
                if len(found) == count:
                    return found
                candidate = word[:idx] + letter + word[idx + 1:]
                if candidate != word and candidate not in found:
                    found.append(candidate)

        return found

    def mutate_word(self, word: str) -> str:
        """Deletes, substitutes or swaps characters (strategy picked at random)."""
        chars = list(word)
        strategy = self.rng.randrange(3)

        if strategy == 0 and len(chars) > 2:
            del chars[self.rng.randrange(len(chars))]
        elif strategy == 2 and len(chars) > 2:
            i, j = self.rng.sample(range(len(chars)), 2)
            chars[i], chars[j] = chars[j], chars[i]
        else:
            # Substitution, also the fallback for short words
            chars[self.rng.randrange(len(chars))] = self.rng.choice(LETTERS)

        return "".join(chars)
