"""
Services module
Export all services
"""

from quickanswer.services.answer_engine import AnswerEngine
from quickanswer.services.classifier import QuestionClassifier, is_question
from quickanswer.services.device_sink import DeviceSink, SimulatedGlassesSink
from quickanswer.services.pipeline import PipelineResult, QuestionPipeline
from quickanswer.services.translator import Translator
from quickanswer.services.tts_service import TTSService, get_tts_service

__all__ = [
    "AnswerEngine",
    "QuestionClassifier",
    "is_question",
    "DeviceSink",
    "SimulatedGlassesSink",
    "PipelineResult",
    "QuestionPipeline",
    "Translator",
    "TTSService",
    "get_tts_service",
]
