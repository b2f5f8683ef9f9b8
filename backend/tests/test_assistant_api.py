"""
Assistant API 测试
classify / translate / answer / ask / speak / voices
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from quickanswer.core.exceptions import ProcessingError, TTSServiceError
from quickanswer.main import app
from quickanswer.services.answer_engine import STATIC_ANSWERS
from quickanswer.services.tts_service import get_tts_service


@pytest.fixture
def mock_tts():
    """替换 TTS 服务，避免访问网络"""
    tts = MagicMock()
    tts.synthesize = AsyncMock(return_value=b"fake mp3")
    app.dependency_overrides[get_tts_service] = lambda: tts
    yield tts
    app.dependency_overrides.pop(get_tts_service, None)


class TestClassify:
    async def test_question(self, client):
        response = await client.post("/api/v1/assistant/classify", json={"text": "ما هذا؟"})
        assert response.status_code == 200
        assert response.json() == {"text": "ما هذا؟", "is_question": True}

    async def test_not_question(self, client):
        response = await client.post("/api/v1/assistant/classify", json={"text": "شكرا"})
        assert response.json()["is_question"] is False

    async def test_empty(self, client):
        response = await client.post("/api/v1/assistant/classify", json={"text": ""})
        assert response.json()["is_question"] is False


class TestTranslate:
    async def test_known_phrase(self, client):
        response = await client.post("/api/v1/assistant/translate", json={"text": "ما هذا؟"})
        assert response.status_code == 200
        assert response.json() == {"original_text": "ما هذا؟", "translated_text": "What is this?"}

    async def test_empty_rejected(self, client):
        response = await client.post("/api/v1/assistant/translate", json={"text": ""})
        assert response.status_code == 422

    async def test_blank_rejected(self, client):
        """验证：纯空白文本返回 422 并指明字段"""
        response = await client.post("/api/v1/assistant/translate", json={"text": "   "})
        assert response.status_code == 422
        assert response.json()["field"] == "text"

    async def test_timeout_maps_to_504(self, client, pipeline):
        pipeline.translator.translate = AsyncMock(
            side_effect=ProcessingError("translate", "timed out", timed_out=True)
        )
        response = await client.post("/api/v1/assistant/translate", json={"text": "ما هذا؟"})
        assert response.status_code == 504
        assert response.json()["stage"] == "translate"

    async def test_failure_maps_to_502(self, client, pipeline):
        pipeline.translator.translate = AsyncMock(side_effect=RuntimeError("offline"))
        response = await client.post("/api/v1/assistant/translate", json={"text": "ما هذا؟"})
        assert response.status_code == 502
        assert "offline" in response.json()["detail"]


class TestAnswer:
    async def test_exact_match(self, client):
        response = await client.post(
            "/api/v1/assistant/answer", json={"question": "What is the speed of light?"}
        )
        assert response.status_code == 200
        assert response.json()["answer"] == STATIC_ANSWERS["What is the speed of light?"]

    async def test_time(self, client):
        response = await client.post(
            "/api/v1/assistant/answer", json={"question": "What time is it?"}
        )
        assert response.json()["answer"] == "The current time is 12:34:56."

    async def test_blank_question_rejected(self, client):
        response = await client.post("/api/v1/assistant/answer", json={"question": " \t"})
        assert response.status_code == 422
        assert response.json()["field"] == "question"


class TestAsk:
    async def test_question(self, client):
        response = await client.post("/api/v1/assistant/ask", json={"text": "ما هذا؟"})
        data = response.json()
        assert data["is_question"] is True
        assert data["translated_question"] == "What is this?"
        assert data["answer"] == STATIC_ANSWERS["What is this?"]

    async def test_not_question(self, client):
        response = await client.post("/api/v1/assistant/ask", json={"text": "شكرا جزيلا"})
        data = response.json()
        assert data == {
            "text": "شكرا جزيلا",
            "is_question": False,
            "translated_question": None,
            "answer": None,
        }


class TestSpeak:
    async def test_speak(self, client, mock_tts):
        response = await client.post(
            "/api/v1/assistant/speak", json={"text": "Hello", "speed": 1.2}
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == "audio/mpeg"
        assert response.content == b"fake mp3"
        mock_tts.synthesize.assert_awaited_once_with(text="Hello", voice=None, speed=1.2)

    async def test_speak_failure(self, client, mock_tts):
        mock_tts.synthesize.side_effect = TTSServiceError("network down", provider="edge")
        response = await client.post("/api/v1/assistant/speak", json={"text": "Hello"})
        assert response.status_code == 502
        assert response.json()["service"] == "tts"

    async def test_blank_text_rejected(self, client, mock_tts):
        response = await client.post("/api/v1/assistant/speak", json={"text": "  "})
        assert response.status_code == 422
        mock_tts.synthesize.assert_not_awaited()

    async def test_speed_out_of_range(self, client, mock_tts):
        response = await client.post(
            "/api/v1/assistant/speak", json={"text": "Hello", "speed": 5}
        )
        assert response.status_code == 422


async def test_voices(client):
    response = await client.get("/api/v1/assistant/voices")
    assert response.status_code == 200
    ids = [v["id"] for v in response.json()]
    assert "en-US-JennyNeural" in ids
