"""
Error taxonomy of the ordering engine.

Precondition failures (bad sizes, bad indices, self pairs, non-finite distances)
abort the current ordering with a clear message. Invariant failures
(attachment conflicts, incomplete traversals) mean the engine itself is
broken and the run must not produce any output.

Every error also derives from the closest builtin so callers that only
know about ``ValueError`` / ``IndexError`` / ``RuntimeError`` keep working.
"""


class OrderingError(Exception):
    """Base class for all ordering engine errors"""
    pass


# =============================================================================
# Precondition failures
# =============================================================================

class InvalidSizeError(OrderingError, ValueError):
    """Node count is too small for the requested structure"""
    pass


class InvalidIndexError(OrderingError, IndexError):
    """Node index outside [0, n)"""
    pass


class SelfPairError(OrderingError, ValueError):
    """Pair access with identical indices"""
    pass


class InvalidDistanceError(OrderingError, ValueError):
    """Distance value that cannot be ordered (NaN, infinite or not a number)"""
    pass


class StoreReleasedError(OrderingError, RuntimeError):
    """Distance store accessed after its memory was released"""
    pass


# =============================================================================
# Invariant failures (fatal for the run)
# =============================================================================

class AttachmentConflictError(OrderingError, RuntimeError):
    """A node was attached to the tree more than once"""
    pass


class IncompleteTraversalError(OrderingError, RuntimeError):
    """Traversal did not reach every attached node"""
    pass
