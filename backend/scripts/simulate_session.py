#!/usr/bin/env python3
"""
本地会话模拟
不经过 WebSocket，直接驱动 SessionController，打印每条事件

用法:
    python scripts/simulate_session.py            # 使用内置问题
    python scripts/simulate_session.py --stdin    # 从标准输入逐行读取转录
    python scripts/simulate_session.py --fast     # 去掉模拟延迟
"""

import argparse
import asyncio
import sys

from quickanswer.core.logging import setup_logging
from quickanswer.services.answer_engine import AnswerEngine
from quickanswer.services.device_sink import SimulatedGlassesSink
from quickanswer.services.pipeline import QuestionPipeline
from quickanswer.services.session import SessionController, SessionEvent, SessionEventType
from quickanswer.services.translator import Translator


class ConsoleSpeechSource:
    """控制台即识别源"""

    async def start(self) -> None:
        print("🎙️  listening (ar-SA)")

    async def stop(self) -> None:
        print("🔇 stopped")


# 测试用例：已知短语、规则提取、兜底、非问题
SAMPLE_TRANSCRIPTS = [
    ("known_01", "ما هذا؟"),
    ("known_02", "ما الوقت الآن"),
    ("known_03", "ما هي سرعة الضوء؟"),
    ("rule_01", "أين المكتبة؟"),
    ("rule_02", "من هو المدير؟"),
    ("rule_03", "كيف أطبخ الأرز؟"),
    ("rule_04", "متى يفتح المتجر؟"),
    ("rule_05", "لماذا السماء زرقاء؟"),
    ("plain_01", "شكرا جزيلا"),
]


def print_event(event: SessionEvent):
    if event.type == SessionEventType.STATE_CHANGED:
        return
    print(f"  [{event.type.value}] {event.title}: {event.description}")
    if event.type == SessionEventType.QUESTION_PROCESSED:
        print(f"      Q: {event.data['question']}")
        print(f"      EN: {event.data['translated_question']}")
        print(f"      A: {event.data['answer']}")


async def main():
    parser = argparse.ArgumentParser(description="Simulate a Quick Answer session")
    parser.add_argument("--stdin", action="store_true", help="read transcripts from stdin")
    parser.add_argument("--fast", action="store_true", help="disable simulated latency")
    parser.add_argument("--no-glasses", action="store_true", help="do not connect the glasses")
    args = parser.parse_args()

    setup_logging()

    latency = 0.0 if args.fast else None
    pipeline = QuestionPipeline(
        translator=Translator(latency=latency),
        engine=AnswerEngine(latency=latency),
    )
    device = SimulatedGlassesSink(connect_latency=latency, send_latency=latency)
    controller = SessionController(
        pipeline=pipeline, speech_source=ConsoleSpeechSource(), device=device
    )
    controller.subscribe(print_event)

    if not args.no_glasses:
        await controller.connect_device()
    await controller.start_listening()

    if args.stdin:
        transcripts = [(f"stdin_{i:02d}", line.strip()) for i, line in enumerate(sys.stdin, 1)]
    else:
        transcripts = SAMPLE_TRANSCRIPTS

    for case_id, text in transcripts:
        print(f"\n▶ {case_id}: {text}")
        task = controller.handle_transcript(text)
        if task is None:
            print("  (not a question, dropped)")
            continue
        await task

    await controller.close()
    print(f"\nSent to glasses: {len(device.sent)}")


if __name__ == "__main__":
    asyncio.run(main())
