"""
LLM Module

Gemini client for the AI proxy endpoints.
"""
from .gemini_client import GeminiClient, GeminiConfig, GeminiResponse

__all__ = ["GeminiClient", "GeminiConfig", "GeminiResponse"]
