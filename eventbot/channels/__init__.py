"""NLU webhook channels."""

from .base import ConversationChannel, InboundTurn
from .dialogflow import DialogflowChannel

__all__ = ["ConversationChannel", "DialogflowChannel", "InboundTurn"]
