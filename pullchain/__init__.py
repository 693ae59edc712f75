"""
pullchain - lazy, restartable pull-based pipelines

This package provides composable operators (Select, Where, Take, OrderBy)
that are chained into a Composer and evaluated only when the chain is
materialized over a finite input sequence.
"""

__version__ = "0.1.0"

# Main API
from pullchain.core.composer import Composer, compose
from pullchain.operators.base import END, Operator
from pullchain.operators.iterate import Iterate
from pullchain.operators.orderby import OrderBy
from pullchain.operators.select import Select
from pullchain.operators.take import Take
from pullchain.operators.where import Where

__all__ = [
    "__version__",
    "END",
    "Composer",
    "Iterate",
    "Operator",
    "OrderBy",
    "Select",
    "Take",
    "Where",
    "compose",
]
