"""
日誌處理器 - 將每個世代的統計寫入 logging
"""
import logging

from .base import EventHandler

logger = logging.getLogger(__name__)


class LoggingHandler(EventHandler):
    """以 DEAP Logbook 的表格格式輸出世代統計"""

    def __init__(self, level: int = logging.INFO):
        super().__init__()
        self.name = "logging_handler"
        self.level = level

    def on_evolution_start(self, engine, **kwargs):
        self._emit(engine)

    def on_generation_complete(self, engine, generation, statistics, **kwargs):
        self._emit(engine)

    def on_evolution_complete(self, engine, result, **kwargs):
        logger.log(self.level, f"最佳個體: {result.best_individual!r} (世代數 {result.generations_completed})")

    def _emit(self, engine):
        text = engine.recorder.stream()
        for line in text.splitlines():
            logger.log(self.level, line)
