"""
Termination predicates for the evolution engine

提供可直接作為引擎 term_func 使用的終止條件：
- EarlyStopping: 連續 N 代最佳適應度無進步時終止
- FitnessThreshold: 最佳適應度達到目標值時終止
"""

from typing import Optional, Dict, Any


def _best_of(stats, mode: str) -> float:
    return stats.max if mode == 'max' else stats.min


class EarlyStopping:
    """
    早停機制

    可單獨以 step() 逐代餵入最佳適應度，也可直接交給引擎作為終止函數：
    引擎每次檢查終止時以目前世代的最佳適應度呼叫，同一世代只計算一次。

    Example:
        >>> engine = EvolutionEngine(..., term_func=EarlyStopping(patience=5, mode='max'))
        >>> engine.evolve()
    """

    def __init__(self, patience: int = 10, min_delta: float = 0.0, mode: str = 'max'):
        """
        Args:
            patience: 連續無進步的世代數量，達到時觸發早停
            min_delta: 改進量必須大於此值才視為進步
            mode: 'max' (適應度越大越好) 或 'min' (越小越好)

        Raises:
            ValueError: 如果 patience < 1 或 mode 不是 'max'/'min'
        """
        if patience < 1:
            raise ValueError(f"patience must be >= 1, got {patience}")

        if mode not in ('max', 'min'):
            raise ValueError(f"mode must be 'max' or 'min', got {mode}")

        self.patience = patience
        self.min_delta = min_delta
        self.mode = mode

        self.counter = 0
        self.best_fitness: Optional[float] = None
        self.should_stop = False
        self.generation = 0
        self._last_seen: Optional[int] = None

    def step(self, current_fitness: float) -> bool:
        """
        餵入一個世代的最佳適應度

        Returns:
            True 表示應該停止
        """
        self.generation += 1

        if self.best_fitness is None:
            self.best_fitness = current_fitness
            return False

        if self.mode == 'max':
            improvement = current_fitness - self.best_fitness
        else:
            improvement = self.best_fitness - current_fitness

        if improvement > self.min_delta:
            self.best_fitness = current_fitness
            self.counter = 0
        else:
            self.counter += 1

        if self.counter >= self.patience:
            self.should_stop = True

        return self.should_stop

    def __call__(self, engine) -> bool:
        generation = engine.current_generation
        if generation == self._last_seen:
            return self.should_stop
        self._last_seen = generation
        return self.step(_best_of(engine.current_statistics(), self.mode))

    def get_status(self) -> Dict[str, Any]:
        """回傳目前早停狀態"""
        return {
            'counter': self.counter,
            'best_fitness': self.best_fitness,
            'should_stop': self.should_stop,
            'generation': self.generation,
            'patience': self.patience,
            'min_delta': self.min_delta,
            'mode': self.mode
        }

    def reset(self):
        """重置早停狀態"""
        self.counter = 0
        self.best_fitness = None
        self.should_stop = False
        self.generation = 0
        self._last_seen = None

    def __repr__(self) -> str:
        return (f"EarlyStopping(patience={self.patience}, min_delta={self.min_delta}, "
                f"mode='{self.mode}', counter={self.counter}, generation={self.generation})")


class FitnessThreshold:
    """目前世代最佳適應度達到 target 時終止"""

    def __init__(self, target: float, mode: str = 'max'):
        if mode not in ('max', 'min'):
            raise ValueError(f"mode must be 'max' or 'min', got {mode}")
        self.target = target
        self.mode = mode

    def __call__(self, engine) -> bool:
        best = _best_of(engine.current_statistics(), self.mode)
        if self.mode == 'max':
            return best >= self.target
        return best <= self.target

    def __repr__(self) -> str:
        return f"FitnessThreshold(target={self.target}, mode='{self.mode}')"
