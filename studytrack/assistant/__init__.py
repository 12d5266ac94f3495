"""Study assistant - prompts, parsers and the generative API client."""

from .client import AIServiceError, GenerativeClient
from . import parsing, prompts

__all__ = [
    "AIServiceError",
    "GenerativeClient",
    "parsing",
    "prompts",
]
