"""Errors raised while building a graph or starting a run"""


class ArbitrageInputError(ValueError):
    """Base class for caller errors detected before a run starts"""


class InvalidInput(ArbitrageInputError):
    """Empty/duplicate node set, unknown currency, or non-positive rate"""


class InvalidSource(ArbitrageInputError):
    """Source currency is not a node of the graph"""
