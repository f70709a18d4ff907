"""Poll protocol types shared by every conflux combinator.

This package provides the vocabulary of the poll protocol: the result of a
poll (Ready or PENDING), the TurnContext handed to each poll, and the
exceptions the combinators raise.

Key components:
- Ready / PENDING / Poll: result of one poll call
- TurnContext: wake handle passed down to every operand
- ContractViolation, SpawnError, Canceled, ChannelClosed: error classes

Example:
    from conflux.types import PENDING, Ready, TurnContext

    cx = TurnContext.noop()
    result = future.poll(cx)
    if isinstance(result, Ready):
        print(result.value)
"""

from .context import TurnContext
from .errors import Canceled, ChannelClosed, ContractViolation, SpawnError
from .poll import PENDING, Poll, Ready, is_ready

__all__ = [
    "TurnContext",
    "PENDING",
    "Poll",
    "Ready",
    "is_ready",
    "ContractViolation",
    "SpawnError",
    "Canceled",
    "ChannelClosed",
]
