"""
Sample genome implementations
"""

from .bit_vector import BitVectorGenome, one_point_crossover, flip_bit_mutation, binary_value
from .real_vector import RealVectorGenome, blend_crossover, gaussian_mutation, sphere

__all__ = [
    'BitVectorGenome', 'one_point_crossover', 'flip_bit_mutation', 'binary_value',
    'RealVectorGenome', 'blend_crossover', 'gaussian_mutation', 'sphere',
]
