"""
Assistant API Routes
问答相关接口（无状态，每个请求独立走一遍流水线）
"""

import io

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from quickanswer.api.deps import get_pipeline
from quickanswer.core.exceptions import ValidationError
from quickanswer.schemas.assistant import (
    AnswerRequest,
    AnswerResponse,
    AskRequest,
    AskResponse,
    ClassifyRequest,
    ClassifyResponse,
    SpeakRequest,
    TranslateRequest,
    TranslateResponse,
    VoiceItem,
)
from quickanswer.services.pipeline import QuestionPipeline
from quickanswer.services.tts_service import TTSService, get_tts_service

router = APIRouter(prefix="/assistant", tags=["Assistant"])


def require_text(field: str, value: str) -> str:
    """空白文本不进入流水线"""
    if not value.strip():
        raise ValidationError(field, "must not be blank")
    return value


@router.post("/classify", response_model=ClassifyResponse)
async def classify(
    request: ClassifyRequest,
    pipeline: QuestionPipeline = Depends(get_pipeline),
):
    """Check whether a transcript is an Arabic question"""
    return ClassifyResponse(text=request.text, is_question=pipeline.is_question(request.text))


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    request: TranslateRequest,
    pipeline: QuestionPipeline = Depends(get_pipeline),
):
    """Translate an Arabic question to English"""
    require_text("text", request.text)
    translated = await pipeline.translate(request.text)
    return TranslateResponse(original_text=request.text, translated_text=translated)


@router.post("/answer", response_model=AnswerResponse)
async def answer(
    request: AnswerRequest,
    pipeline: QuestionPipeline = Depends(get_pipeline),
):
    """Answer an English question"""
    require_text("question", request.question)
    text = await pipeline.answer(request.question)
    return AnswerResponse(question=request.question, answer=text)


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    pipeline: QuestionPipeline = Depends(get_pipeline),
):
    """Transcript -> classify -> translate -> answer"""
    result = await pipeline.ask(request.text)
    if result is None:
        return AskResponse(text=request.text, is_question=False)

    return AskResponse(
        text=request.text,
        is_question=True,
        translated_question=result.translated_question,
        answer=result.answer,
    )


# ========== TTS ==========


@router.post("/speak")
async def speak(
    request: SpeakRequest,
    tts: TTSService = Depends(get_tts_service),
):
    """Convert an answer to speech (English voice)"""
    require_text("text", request.text)
    audio_data = await tts.synthesize(text=request.text, voice=request.voice, speed=request.speed)

    return StreamingResponse(
        io.BytesIO(audio_data),
        media_type="audio/mpeg",
        headers={"Content-Disposition": "attachment; filename=answer.mp3"},
    )


@router.get("/voices", response_model=list[VoiceItem])
async def get_voices():
    """Get available English voices"""
    return TTSService.get_available_voices()
