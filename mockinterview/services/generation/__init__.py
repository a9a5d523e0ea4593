"""
Generation Service Package

Wraps the hosted text-generation service behind a narrow generate(prompt)
interface so callers can be tested against a stub.
"""

from .generation_client import GenerationClient

__all__ = ["GenerationClient"]
