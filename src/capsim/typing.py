"""
Type aliases for capsim.

Every role stores its entity attributes column-wise in one-dimensional
NumPy arrays; these aliases name the array flavours used across the
package.

Examples
--------
>>> from capsim import role
>>> from capsim.typing import Float1D, Idx1D
>>>
>>> @role
... class Inventory:
...     quantity: Float1D
...     holder: Idx1D
"""

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

Float1D: TypeAlias = NDArray[np.float64]
Int1D: TypeAlias = NDArray[np.int64]
Bool1D: TypeAlias = NDArray[np.bool_]
Idx1D: TypeAlias = NDArray[np.intp]
Str1D: TypeAlias = NDArray[np.str_]

Float = Float1D
"""Array of floating-point values (quantities, values, prices, ...)."""

Idx = Idx1D
"""Array of entity indices (-1 for unassigned)."""

__all__ = [
    "Float",
    "Idx",
    "Float1D",
    "Int1D",
    "Bool1D",
    "Idx1D",
    "Str1D",
]
