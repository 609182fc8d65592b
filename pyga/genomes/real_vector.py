"""
Real-valued vector genome

Individuals are lists of floats within [low, high]. Crossover and
mutation delegate to DEAP's blend crossover and gaussian mutation.
"""
import random
from typing import List, Optional, Sequence

import numpy as np
from deap import tools

from pyga.evolution.genome import Genome, OperatorRegistry


class RealVectorGenome(Genome):
    """Real-valued individual; bounds are enforced after every operator."""

    size = 5
    low = -5.12
    high = 5.12

    def __init__(self, genes: Optional[Sequence[float]] = None):
        super().__init__()
        self.genes: List[float] = [float(gene) for gene in genes] if genes is not None else []

    @classmethod
    def configure(cls, size: int = 5, low: float = -5.12, high: float = 5.12) -> type:
        """Returns a subclass with the given dimension and bounds."""
        if size < 1:
            raise ValueError(f"size must be >= 1, got {size}")
        if low >= high:
            raise ValueError(f"low must be lower than high ({low} >= {high})")
        return type(f"{cls.__name__}{size}", (cls,), {'size': size, 'low': low, 'high': high})

    @classmethod
    def create(cls, genes: Optional[Sequence[float]] = None) -> 'RealVectorGenome':
        return cls(genes)

    def initialize(self):
        self.genes = [random.uniform(self.low, self.high) for _ in range(self.size)]

    @classmethod
    def build_operators(cls) -> OperatorRegistry:
        registry = OperatorRegistry()
        registry.register('crossover', blend_crossover, alpha=0.5)
        registry.register('mutation', gaussian_mutation, mu=0.0, sigma=1.0, indpb=0.2)
        return registry

    def clip(self):
        self.genes = np.clip(self.genes, self.low, self.high).tolist()

    def as_string(self) -> str:
        genes = ', '.join(f"{gene:.4f}" for gene in self.genes)
        return f"[{genes}]({self.fitness})"

    def __repr__(self) -> str:
        return f"RealVectorGenome({self.as_string()})"


def blend_crossover(mom: RealVectorGenome, dad: RealVectorGenome, alpha: float = 0.5) -> List[RealVectorGenome]:
    """BLX-alpha crossover on copies of the parents' genes."""
    genes1, genes2 = list(mom.genes), list(dad.genes)
    tools.cxBlend(genes1, genes2, alpha)
    children = [type(mom).create(genes1), type(mom).create(genes2)]
    for child in children:
        child.clip()
    return children


def gaussian_mutation(individual: RealVectorGenome, mu: float = 0.0, sigma: float = 1.0,
                      indpb: float = 0.2) -> List[RealVectorGenome]:
    """Gaussian mutation in place; each gene mutates with probability `indpb`."""
    tools.mutGaussian(individual.genes, mu, sigma, indpb)
    individual.clip()
    return [individual]


def sphere(engine, individual: RealVectorGenome) -> float:
    """Sum of squares; minimise it with ordering='asc'."""
    genes = np.asarray(individual.genes, dtype=float)
    return float(np.sum(genes * genes))
