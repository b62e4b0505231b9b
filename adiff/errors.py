"""Everything that can go wrong is a misuse of the layer contract, so every
error is raised where the misuse happens and never retried."""


class AdiffError(Exception):
    """Base class for all errors raised by adiff"""


class DimensionMismatchError(AdiffError, ValueError):
    """A width doesn't match: a parent's output, a weight shape or an input"""


class ChainAssemblyError(AdiffError, ValueError):
    """The layers handed to a chain don't form a single root-to-tail chain"""


class UninitializedStateError(AdiffError, RuntimeError):
    """backward was asked for before forward filled in the cached state"""


class WeightsNotSetError(UninitializedStateError):
    """A Linear layer was used before set_weights"""


class ParentReleasedError(AdiffError, RuntimeError):
    """The parent of a chained layer has been garbage collected"""
