"""Service layer for the temple passport"""
from temple_passport.services.progression_service import ProgressionService

__all__ = ["ProgressionService"]
