"""
TTS Service
文字转语音服务（英语回答朗读）
"""

import os
import tempfile
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

from loguru import logger

from quickanswer.core.config import settings
from quickanswer.core.exceptions import TTSServiceError
from quickanswer.core.logging import log_external_call


class SpeechSink(Protocol):
    """语音输出通道"""

    async def speak(self, text: str, lang: str) -> None: ...


class TTSService:
    """Text-to-Speech Service (edge-tts)"""

    def __init__(self, voice: str | None = None, provider: str | None = None):
        self.provider = provider or settings.DEFAULT_TTS_PROVIDER
        self.voice = voice or settings.DEFAULT_TTS_VOICE

    async def synthesize(self, text: str, voice: str | None = None, speed: float = 1.0) -> bytes:
        """
        Synthesize speech from text

        Returns: Audio bytes (MP3 format)
        """
        if self.provider != "edge":
            raise TTSServiceError(f"Unsupported TTS provider: {self.provider}", provider=self.provider)

        voice = voice or self.voice
        start = time.perf_counter()
        try:
            audio = await self._synthesize_edge_tts(text, voice, speed)
        except Exception as e:
            log_external_call(
                "tts", self.provider, (time.perf_counter() - start) * 1000, False, str(e)
            )
            raise TTSServiceError(str(e), provider=self.provider) from e

        log_external_call("tts", self.provider, (time.perf_counter() - start) * 1000, True)
        return audio

    async def _synthesize_edge_tts(self, text: str, voice: str, speed: float) -> bytes:
        """Use Edge TTS (free Microsoft TTS)"""
        import edge_tts

        # Adjust rate based on speed
        rate = f"+{int((speed - 1) * 100)}%" if speed >= 1 else f"{int((speed - 1) * 100)}%"

        communicate = edge_tts.Communicate(text, voice, rate=rate)

        # Create temp file
        with tempfile.NamedTemporaryFile(suffix=".mp3", delete=False) as tmp_file:
            tmp_path = tmp_file.name

        try:
            await communicate.save(tmp_path)

            with open(tmp_path, "rb") as f:
                audio_data = f.read()

            return audio_data
        finally:
            os.unlink(tmp_path)

    @staticmethod
    def get_available_voices(lang_prefix: str = "en") -> list:
        """Get list of available Edge TTS voices for answer playback"""
        voices = [
            # English US
            {"id": "en-US-JennyNeural", "name": "Jenny (Female)", "lang": "en-US"},
            {"id": "en-US-GuyNeural", "name": "Guy (Male)", "lang": "en-US"},
            {"id": "en-US-AriaNeural", "name": "Aria (Female)", "lang": "en-US"},
            # English UK
            {"id": "en-GB-SoniaNeural", "name": "Sonia (Female)", "lang": "en-GB"},
            {"id": "en-GB-RyanNeural", "name": "Ryan (Male)", "lang": "en-GB"},
        ]
        return [v for v in voices if v["lang"].startswith(lang_prefix)]

    def voice_for(self, lang: str) -> str:
        """按语言选择声音，默认声音语言不匹配时取该语言的第一个"""
        if self.voice.startswith(lang):
            return self.voice
        for voice in self.get_available_voices(lang.split("-")[0]):
            if voice["lang"] == lang:
                return voice["id"]
        return self.voice


class TTSSpeechSink:
    """合成音频后交给 deliver 回调（例如通过 WebSocket 发送给客户端播放）"""

    def __init__(self, tts: TTSService, deliver: Callable[[bytes], Awaitable[None]]):
        self.tts = tts
        self.deliver = deliver

    async def speak(self, text: str, lang: str) -> None:
        audio = await self.tts.synthesize(text, voice=self.tts.voice_for(lang))
        await self.deliver(audio)
        logger.debug(f"Spoke answer ({len(audio)} bytes, {lang})")


async def get_tts_service() -> TTSService:
    """Get TTS service instance"""
    return TTSService()
