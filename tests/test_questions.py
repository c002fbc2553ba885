"""
Unit tests for question generation.
"""

import random
import re

import pytest
from quiz_snake.questions import (
    Subject, Difficulty, AnswerOption, Question, QuestionGenerator
)
from quiz_snake.words import WORD_LISTS, TRANSLATIONS, missing_translations


PROMPT_RE = re.compile(r"^(\d+) ([+\-×÷]) (\d+)$")


def parse_prompt(prompt):
    match = PROMPT_RE.match(prompt)
    assert match, prompt
    return int(match.group(1)), match.group(2), int(match.group(3))


class TestParsing:
    def test_subject_values(self):
        assert Subject.parse("math") == Subject.MATH
        assert Subject.parse("Vocabulary") == Subject.VOCABULARY

    def test_english_alias(self):
        assert Subject.parse("english") == Subject.VOCABULARY

    def test_enum_passthrough(self):
        assert Subject.parse(Subject.MATH) == Subject.MATH
        assert Difficulty.parse(Difficulty.HARD) == Difficulty.HARD

    def test_unknown_subject(self):
        with pytest.raises(ValueError):
            Subject.parse("chemistry")

    def test_unknown_difficulty(self):
        with pytest.raises(ValueError):
            Difficulty.parse("insane")


class TestQuestionValidation:
    def test_valid_question(self):
        q = Question("2 + 2", (AnswerOption(4, True), AnswerOption(3, False),
                               AnswerOption(5, False)), Subject.MATH, Difficulty.EASY)
        assert q.validate() is q
        assert q.correct_answer.value == 4
        assert {a.value for a in q.wrong_answers} == {3, 5}

    def test_two_correct_rejected(self):
        q = Question("2 + 2", (AnswerOption(4, True), AnswerOption(3, True),
                               AnswerOption(5, False)), Subject.MATH, Difficulty.EASY)
        with pytest.raises(ValueError):
            q.validate()

    def test_wrong_count_rejected(self):
        q = Question("2 + 2", (AnswerOption(4, True), AnswerOption(3, False)),
                     Subject.MATH, Difficulty.EASY)
        with pytest.raises(ValueError):
            q.validate()

    def test_duplicate_values_rejected(self):
        q = Question("2 + 2", (AnswerOption(4, True), AnswerOption(3, False),
                               AnswerOption(3, False)), Subject.MATH, Difficulty.EASY)
        with pytest.raises(ValueError):
            q.validate()


class TestMathQuestions:
    def setup_method(self):
        self.generator = QuestionGenerator(random.Random(42))

    def test_easy_wrong_answers_near_correct(self):
        for _ in range(500):
            q = self.generator.generate("math", "easy")
            correct = q.correct_answer.value
            wrongs = [a.value for a in q.wrong_answers]
            assert len(wrongs) == 2
            assert len(set(wrongs)) == 2
            for w in wrongs:
                assert w != correct
                assert w >= 0
                assert abs(w - correct) <= 2

    def test_easy_operations_and_ranges(self):
        ops = set()
        for _ in range(500):
            q = self.generator.generate(Subject.MATH, Difficulty.EASY)
            a, op, b = parse_prompt(q.prompt)
            ops.add(op)
            assert op in ("+", "-")
            assert 1 <= a <= 10
            assert 1 <= b <= 10
            if op == "-":
                assert b <= a
                assert q.correct_answer.value == a - b
            else:
                assert q.correct_answer.value == a + b
        assert ops == {"+", "-"}

    def test_medium_ranges(self):
        ops = set()
        for _ in range(600):
            q = self.generator.generate(Subject.MATH, Difficulty.MEDIUM)
            a, op, b = parse_prompt(q.prompt)
            ops.add(op)
            if op == "×":
                assert 1 <= a <= 10 and 1 <= b <= 10
                assert q.correct_answer.value == a * b
            elif op == "-":
                assert 1 <= b <= a <= 20
                assert q.correct_answer.value == a - b
            else:
                assert 1 <= a <= 20 and 1 <= b <= 20
                assert q.correct_answer.value == a + b
        assert ops == {"+", "-", "×"}

    def test_hard_division_is_exact(self):
        ops = set()
        for _ in range(500):
            q = self.generator.generate(Subject.MATH, Difficulty.HARD)
            a, op, b = parse_prompt(q.prompt)
            ops.add(op)
            if op == "÷":
                assert 2 <= b <= 12
                assert a % b == 0
                assert 2 <= a // b <= 12
                assert q.correct_answer.value == a // b
            else:
                assert op == "×"
                assert 2 <= a <= 12 and 2 <= b <= 12
        assert ops == {"×", "÷"}

    def test_every_tier_has_one_correct_of_three(self):
        for difficulty in Difficulty:
            for _ in range(100):
                q = self.generator.generate(Subject.MATH, difficulty)
                assert len(q.answers) == 3
                assert sum(1 for a in q.answers if a.correct) == 1

    def test_answer_order_is_shuffled(self):
        positions = set()
        for _ in range(100):
            q = self.generator.generate(Subject.MATH, Difficulty.EASY)
            positions.add(next(i for i, a in enumerate(q.answers) if a.correct))
        assert positions == {0, 1, 2}

    def test_wrong_numbers_for_zero(self):
        for _ in range(50):
            assert sorted(self.generator.wrong_numbers(0)) == [1, 2]

    def test_wrong_numbers_for_one(self):
        for _ in range(50):
            wrongs = self.generator.wrong_numbers(1)
            assert set(wrongs) <= {0, 2, 3}
            assert len(set(wrongs)) == 2

    def test_wrong_numbers_widen_when_needed(self):
        wrongs = self.generator.wrong_numbers(0, count=4)
        assert sorted(wrongs) == [1, 2, 3, 4]

    def test_same_seed_same_questions(self):
        a = QuestionGenerator(random.Random(9))
        b = QuestionGenerator(random.Random(9))
        for _ in range(20):
            assert a.generate("math", "hard") == b.generate("math", "hard")


class TestVocabularyQuestions:
    def setup_method(self):
        self.generator = QuestionGenerator(random.Random(3))

    def test_dictionary_covers_every_word(self):
        assert missing_translations() == []
        for words in WORD_LISTS.values():
            assert len(words) == 10

    def test_missing_translation_detected(self):
        missing = missing_translations({"easy": ["cat", "zebra"]}, TRANSLATIONS)
        assert missing == ["zebra"]

    def test_two_distinct_misspellings(self):
        for difficulty in Difficulty:
            for _ in range(200):
                q = self.generator.generate(Subject.VOCABULARY, difficulty)
                word = q.correct_answer.value
                wrongs = [a.value for a in q.wrong_answers]
                assert word in WORD_LISTS[difficulty.value]
                assert len(wrongs) == 2
                assert len(set(wrongs)) == 2
                assert word not in wrongs

    def test_prompt_shows_translation(self):
        q = self.generator.generate("vocabulary", "easy")
        word = q.correct_answer.value
        assert TRANSLATIONS[word] in q.prompt
        assert word not in q.prompt

    def test_mutation_strategies(self):
        word = "pencil"
        lengths = set()
        for _ in range(300):
            mutated = self.generator.mutate_word(word)
            lengths.add(len(mutated))
            assert len(mutated) in (len(word) - 1, len(word))
        assert lengths == {5, 6}

    def test_short_word_never_shrinks(self):
        for _ in range(100):
            assert len(self.generator.mutate_word("ab")) == 2

    def test_fallback_without_random_attempts(self):
        generator = QuestionGenerator(random.Random(0), max_mutation_attempts=0)
        wrongs = generator.misspellings("cat")
        assert len(wrongs) == 2
        assert len(set(wrongs)) == 2
        assert "cat" not in wrongs

    def test_fallback_single_letter_word(self):
        generator = QuestionGenerator(random.Random(0), max_mutation_attempts=0)
        assert generator.misspellings("a") == ["b", "c"]
