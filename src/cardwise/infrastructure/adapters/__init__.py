# Infrastructure Adapters Package
from .file_store import FileStudyRepository

__all__ = ["FileStudyRepository"]
