"""
Database module for vector storage and retrieval
"""

from .simple_store import SimpleVectorStore

__all__ = ['SimpleVectorStore']
