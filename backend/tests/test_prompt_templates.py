"""
Tests for quiz prompt construction.
"""

from quizgen.models.quiz_models import ChatMessage
from quizgen.utils.prompt_templates import MAX_SOURCE_CHARS, SYSTEM_PROMPT, build_quiz_prompt


class TestBuildQuizPrompt:
    def test_short_text_is_embedded_verbatim(self):
        text = "Mitochondria are the powerhouse of the cell.\n  Indented line kept as-is."
        prompt = build_quiz_prompt(text)

        assert prompt.source_text == text
        assert text in prompt.user

    def test_text_at_cap_is_not_cut(self):
        text = "x" * MAX_SOURCE_CHARS
        assert build_quiz_prompt(text).source_text == text

    def test_long_text_is_cut_to_first_1000_chars(self):
        text = "a" * 999 + "b" + "c" * 500
        prompt = build_quiz_prompt(text)

        assert prompt.source_text == text[:1000]
        assert len(prompt.source_text) == 1000
        assert prompt.source_text.endswith("b")
        assert "c" not in prompt.user.split("\n\n")[1]

    def test_truncation_ignores_sentence_boundaries(self):
        text = "Sentence one. " * 100
        cut = build_quiz_prompt(text).source_text
        assert cut == text[:1000]
        assert not cut.endswith(". ")

    def test_template_asks_for_three_questions_in_json(self):
        prompt = build_quiz_prompt("Some text")

        assert prompt.user.startswith("Create 3 multiple-choice questions based on this text:")
        assert '"options": ["A", "B", "C", "D"]' in prompt.user
        assert '"correctAnswer"' in prompt.user

    def test_messages_are_system_then_user(self):
        prompt = build_quiz_prompt("Some text")
        messages = prompt.to_messages()

        assert messages == [
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt.user),
        ]

    def test_system_prompt_is_constant(self):
        assert build_quiz_prompt("one").system == build_quiz_prompt("two").system == SYSTEM_PROMPT
