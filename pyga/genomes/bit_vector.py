"""
Bit-vector genome

A fixed-length vector of bits with one-point crossover and single
flip-bit mutation. The default length of seven bits matches the
canonical example run in configs/sample_config.json.
"""
import random
from typing import List, Optional, Sequence

from pyga.evolution.genome import Genome, OperatorRegistry

DEFAULT_BITS = 7


class BitVectorGenome(Genome):
    """
    Bit-vector individual.

    `genes[i]` is the bit of weight 2**i; `as_string()` prints the
    most significant bit first.
    """

    bits = DEFAULT_BITS

    def __init__(self, genes: Optional[Sequence[int]] = None, bits: Optional[int] = None):
        super().__init__()
        self.genes: List[int] = list(genes) if genes is not None else []
        if bits is not None:
            self.bits = bits
        elif genes is not None and len(self.genes) != self.bits:
            self.bits = len(self.genes)

    @classmethod
    def with_bits(cls, bits: int = DEFAULT_BITS) -> type:
        """Returns a subclass whose individuals carry `bits` bits."""
        if bits < 2:
            raise ValueError(f"a bit vector needs at least 2 bits, got {bits}")
        return type(f"{cls.__name__}{bits}", (cls,), {'bits': bits})

    @classmethod
    def create(cls, genes: Optional[Sequence[int]] = None) -> 'BitVectorGenome':
        return cls(genes)

    def initialize(self):
        self.genes = [random.randint(0, 1) for _ in range(self.bits)]

    @classmethod
    def build_operators(cls) -> OperatorRegistry:
        registry = OperatorRegistry()
        registry.register('crossover', one_point_crossover)
        registry.register('mutation', flip_bit_mutation)
        return registry

    def as_string(self) -> str:
        bits = ', '.join(str(bit) for bit in reversed(self.genes))
        return f"[{bits}]({self.fitness})"

    def __len__(self) -> int:
        return len(self.genes)

    def __repr__(self) -> str:
        return f"BitVectorGenome({self.as_string()})"


def one_point_crossover(mom: BitVectorGenome, dad: BitVectorGenome,
                        point: Optional[int] = None) -> List[BitVectorGenome]:
    """
    One-point crossover.

    Children take bits 0..point (inclusive) from one parent and the rest
    from the other. `point` is drawn uniformly from [1, L-1] when omitted.
    The parents are left untouched.

    Raises:
        ValueError: if the parents differ in length or `point` is out of range.
    """
    if len(mom.genes) != len(dad.genes):
        raise ValueError(f"parents must have the same length ({len(mom.genes)} != {len(dad.genes)})")

    last_bit = len(mom.genes) - 1
    if point is None:
        point = random.randint(1, last_bit)
    elif not 1 <= point <= last_bit:
        raise ValueError(f"crossover point must be in [1, {last_bit}], got {point}")

    cut = point + 1
    genome_type = type(mom)
    return [
        genome_type.create(mom.genes[:cut] + dad.genes[cut:]),
        genome_type.create(dad.genes[:cut] + mom.genes[cut:]),
    ]


def flip_bit_mutation(individual: BitVectorGenome, position: Optional[int] = None) -> List[BitVectorGenome]:
    """Flips a single bit in place and returns the same individual."""
    if position is None:
        position = random.randrange(len(individual.genes))
    individual.genes[position] = 1 - individual.genes[position]
    return [individual]


def binary_value(engine, individual: BitVectorGenome) -> float:
    """Binary value of the bits normalized to [0, 1)."""
    value = sum(bit * 2 ** i for i, bit in enumerate(individual.genes))
    return value / 2 ** len(individual.genes)
