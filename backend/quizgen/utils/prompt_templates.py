from quizgen.models.quiz_models import QuizPrompt

MAX_SOURCE_CHARS = 1000
NUM_QUESTIONS = 3

SYSTEM_PROMPT = "You generate quiz questions."

QUIZ_FORMAT = (
    'Format: JSON [{"question": "...", "options": ["A", "B", "C", "D"], '
    '"correctAnswer": "A"}]'
)


def build_quiz_prompt(text: str) -> QuizPrompt:
    # Plain prefix cut on code points; sentences may be split mid-way.
    source_text = text[:MAX_SOURCE_CHARS]
    user = (
        f"Create {NUM_QUESTIONS} multiple-choice questions based on this text:\n\n"
        f"{source_text}\n\n"
        f"{QUIZ_FORMAT}"
    )
    return QuizPrompt(system=SYSTEM_PROMPT, user=user, source_text=source_text)
