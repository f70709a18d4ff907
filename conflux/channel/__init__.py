"""One-shot channel connecting a spawned task to its observer handle."""

from .oneshot import Receiver, Sender, channel

__all__ = ["channel", "Sender", "Receiver"]
