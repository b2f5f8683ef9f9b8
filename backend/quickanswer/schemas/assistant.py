"""
Assistant Schemas
问答相关的请求/响应模型
"""

from pydantic import BaseModel, Field

# ========== Classification ==========


class ClassifyRequest(BaseModel):
    """Question classification request"""

    text: str


class ClassifyResponse(BaseModel):
    """Question classification response"""

    text: str
    is_question: bool


# ========== Translation ==========


class TranslateRequest(BaseModel):
    """Arabic question translation request"""

    text: str = Field(..., min_length=1)


class TranslateResponse(BaseModel):
    """Arabic question translation response"""

    original_text: str
    translated_text: str


# ========== Answer ==========


class AnswerRequest(BaseModel):
    """English question answer request"""

    question: str = Field(..., min_length=1)


class AnswerResponse(BaseModel):
    question: str
    answer: str


# ========== Full pipeline ==========


class AskRequest(BaseModel):
    """Transcript -> answer request"""

    text: str


class AskResponse(BaseModel):
    """Transcript -> answer response (fields are null for non-questions)"""

    text: str
    is_question: bool
    translated_question: str | None = None
    answer: str | None = None


# ========== TTS ==========


class SpeakRequest(BaseModel):
    """Answer playback request"""

    text: str = Field(..., min_length=1)
    voice: str | None = None
    speed: float = Field(1.0, gt=0.25, le=3.0)


class VoiceItem(BaseModel):
    id: str
    name: str
    lang: str
