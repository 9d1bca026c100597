"""Locale key tables and the event translator."""

from bedrock_chatlog.translation.event_translator import EventTranslator

__all__ = ["EventTranslator"]
