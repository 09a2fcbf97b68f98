from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal, Union


class QuizQuestion(BaseModel):
    # Only the shape is checked: option count and whether correctAnswer is
    # one of the options are left to the caller.
    model_config = ConfigDict(extra="allow")

    question: str
    options: List[str]
    # an option string, or an index when the model answers that way
    correctAnswer: Union[str, int]


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class QuizPrompt(BaseModel):
    system: str
    user: str
    source_text: str = Field(..., description="Truncated document text embedded in `user`")

    def to_messages(self) -> List[ChatMessage]:
        return [
            ChatMessage(role="system", content=self.system),
            ChatMessage(role="user", content=self.user),
        ]


class GenerationRequest(BaseModel):
    model: str
    messages: List[ChatMessage]
    temperature: float


class GenerateQuestionsRequest(BaseModel):
    text: Optional[str] = None


class GenerateQuestionsResponse(BaseModel):
    questions: List[QuizQuestion]
