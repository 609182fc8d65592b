"""
事件處理器基類

定義演化過程中事件處理的基本接口。
"""


class EventHandler:
    """
    事件處理器基類

    子類只需覆寫關心的事件方法。
    """

    def __init__(self):
        self.name = "base_handler"
        self.engine = None

    def set_engine(self, engine):
        """設置演化引擎引用"""
        self.engine = engine

    def on_evolution_start(self, engine, **kwargs):
        """演化開始事件"""

    def on_generation_complete(self, engine, generation, statistics, **kwargs):
        """世代完成事件 (評估與統計之後)"""

    def on_evolution_complete(self, engine, result, **kwargs):
        """演化完成事件"""
