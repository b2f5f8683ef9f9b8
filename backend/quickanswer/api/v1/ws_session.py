"""
WebSocket Session Route
实时问答会话接口

客户端负责语音识别（ar-SA）和通知渲染；服务端持有会话状态并推送事件。

客户端消息 (JSON, action 字段):
- start: 开始监听（recognition_available=false 表示客户端没有识别能力）
- stop: 停止监听
- transcript: 转录文本 (text, is_final)
- recognition_error: 识别器报错 (error)
- connect / disconnect: 连接 / 断开眼镜
- speak: 朗读当前回答（音频以二进制帧返回）
- ping: 心跳
"""

from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from loguru import logger

from quickanswer.api.deps import get_device, get_pipeline
from quickanswer.core.config import settings
from quickanswer.core.exceptions import QuickAnswerError
from quickanswer.services.connection_manager import manager
from quickanswer.services.device_sink import DeviceSink
from quickanswer.services.pipeline import QuestionPipeline
from quickanswer.services.recognition import ClientSpeechSource
from quickanswer.services.session import SessionController, SessionEvent
from quickanswer.services.tts_service import TTSService, TTSSpeechSink, get_tts_service

router = APIRouter(prefix="/ws", tags=["WebSocket"])


@router.websocket("/session")
async def websocket_session(
    websocket: WebSocket,
    pipeline: QuestionPipeline = Depends(get_pipeline),
    device: DeviceSink = Depends(get_device),
    tts: TTSService = Depends(get_tts_service),
):
    """Real-time question session WebSocket endpoint."""
    client_id = f"session_{id(websocket)}"
    await manager.connect(websocket, client_id)

    async def notify_client(data: dict) -> bool:
        return await manager.send_json(client_id, data)

    async def deliver_audio(audio: bytes):
        await manager.send_bytes(client_id, audio)

    controller = SessionController(
        pipeline=pipeline,
        device=device,
        speech_sink=TTSSpeechSink(tts, deliver_audio),
        session_id=client_id,
    )

    # 事件按产生顺序逐个发送
    outbox: asyncio.Queue[SessionEvent] = asyncio.Queue()
    controller.subscribe(outbox.put_nowait)

    async def event_sender():
        while True:
            event = await outbox.get()
            try:
                await manager.send_event(client_id, event)
            finally:
                outbox.task_done()

    sender_task = asyncio.create_task(event_sender())

    # 后台任务集合（connect / speak 不阻塞消息循环）
    background_tasks: set[asyncio.Task] = set()

    async def run_action(coro):
        try:
            await coro
        except QuickAnswerError as e:
            logger.error(f"Session action failed: {e.message}")
            await manager.send_error(client_id, e.message)

    def spawn(coro):
        task = asyncio.create_task(run_action(coro))
        background_tasks.add(task)
        task.add_done_callback(background_tasks.discard)

    await manager.send_event(client_id, SessionEvent.state_changed(controller.snapshot()))
    logger.info(f"Session started: {client_id}")

    try:
        while True:
            try:
                data = json.loads(await websocket.receive_text())
            except WebSocketDisconnect:
                logger.info(f"WebSocket disconnected: {client_id}")
                break
            except json.JSONDecodeError:
                await manager.send_error(client_id, "Invalid JSON message")
                continue

            if not isinstance(data, dict):
                await manager.send_error(client_id, "Message must be a JSON object")
                continue

            action = data.get("action")

            if action == "start":
                if controller.speech_source is None and data.get("recognition_available", True):
                    controller.speech_source = ClientSpeechSource(notify_client)
                await run_action(controller.start_listening())

            elif action == "stop":
                await run_action(controller.stop_listening())

            elif action == "transcript":
                text = data.get("text") or ""
                if not isinstance(text, str):
                    await manager.send_error(client_id, "Transcript text must be a string")
                    continue
                is_final = data.get("is_final", True)
                if is_final or settings.PROCESS_INTERIM_TRANSCRIPTS:
                    controller.handle_transcript(text)

            elif action == "recognition_error":
                controller.handle_recognition_error(data.get("error"))

            elif action == "connect":
                spawn(controller.connect_device())

            elif action == "disconnect":
                controller.disconnect_device()

            elif action == "speak":
                spawn(controller.speak_answer())

            elif action == "ping":
                await manager.send_pong(client_id)

            else:
                await manager.send_error(client_id, f"Unknown action: {action}")

    finally:
        if background_tasks:
            await asyncio.gather(*list(background_tasks), return_exceptions=True)
        await controller.close()

        # 把剩余事件发完（客户端已断开时 send_json 返回 False）
        try:
            await asyncio.wait_for(outbox.join(), timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning(f"Dropped {outbox.qsize()} pending events for {client_id}")
        sender_task.cancel()
        try:
            await sender_task
        except asyncio.CancelledError:
            pass

        manager.disconnect(client_id)
