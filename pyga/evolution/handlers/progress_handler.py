"""
進度處理器 - 以 tqdm 顯示演化進度
"""
from typing import Optional

from tqdm import tqdm

from .base import EventHandler


class ProgressHandler(EventHandler):
    """每完成一個世代推進一格進度條"""

    def __init__(self, desc: str = "Generation", leave: bool = True, disable: bool = False):
        super().__init__()
        self.name = "progress_handler"
        self.desc = desc
        self.leave = leave
        self.disable = disable
        self.pbar: Optional[tqdm] = None

    def on_evolution_start(self, engine, **kwargs):
        total = max(engine.max_generations - engine.current_generation, 0)
        self.pbar = tqdm(total=total, desc=self.desc, leave=self.leave, disable=self.disable)

    def on_generation_complete(self, engine, generation, statistics, **kwargs):
        if self.pbar is None:
            return
        self.pbar.set_description(f"Gen {generation} | Avg: {statistics.avg:.4f} | Best: {engine.fittest().fitness:.4f}")
        self.pbar.update(1)

    def on_evolution_complete(self, engine, result, **kwargs):
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None
