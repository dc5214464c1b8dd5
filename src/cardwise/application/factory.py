"""
Study Repository Factory
Centralizes the logic for selecting the storage adapter.
"""

from cardwise.application.config import AppConfig
from cardwise.domain.stats.ports import StudyRepository
from cardwise.infrastructure.adapters.file_store import FileStudyRepository


def get_study_repository(config: AppConfig) -> StudyRepository:
    """
    Returns the StudyRepository implementation for the configured data file.
    """
    if config.data_file is None:
        raise ValueError("No data file configured")

    # 1. Manual selection
    if config.backend in ("yaml", "json"):
        return FileStudyRepository(config.data_file, file_format=config.backend)

    # 2. Auto selection by file suffix
    return FileStudyRepository(config.data_file)
