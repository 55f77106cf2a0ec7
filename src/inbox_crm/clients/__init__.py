"""
External service clients for the inbox CRM.
"""

from .openai_client import OpenAIClient

__all__ = ['OpenAIClient']
