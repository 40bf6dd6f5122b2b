"""End-to-end event vs baseline study"""

from .runner import EventStudyRunner, StudyResult

__all__ = ["EventStudyRunner", "StudyResult"]
