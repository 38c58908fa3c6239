# storage/__init__.py
"""File-backed storage for CVs, job postings and matrices"""

from storage.file_store import FileStore

__all__ = ['FileStore']
