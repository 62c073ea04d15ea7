"""Real-time change notifications."""

from studyhub.services.realtime.change_feed import ChangeFeed, ChangeSignal

__all__ = ["ChangeFeed", "ChangeSignal"]
