"""
LLM Chat Module

Gemini-backed assistant that explains an already-computed diagnosis.
The assistant is NON-DECISIONAL: it explains, it does not diagnose.
"""
from .gemini_client import ChatAssistant, ChatReply, build_system_instruction

__all__ = [
    "ChatAssistant",
    "ChatReply",
    "build_system_instruction",
]
