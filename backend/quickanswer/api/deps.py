"""
API Dependencies
共用的依赖注入
"""

from functools import lru_cache

from quickanswer.services.device_sink import DeviceSink, SimulatedGlassesSink
from quickanswer.services.pipeline import QuestionPipeline


@lru_cache
def get_pipeline() -> QuestionPipeline:
    """共享的问答流水线（规则表只读，可跨会话复用）"""
    return QuestionPipeline()


def get_device() -> DeviceSink:
    """每个会话一个设备连接"""
    return SimulatedGlassesSink()
