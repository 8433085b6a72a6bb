"""Conversational event-report webhook for Dialogflow ES."""

__version__ = "0.1.0"
