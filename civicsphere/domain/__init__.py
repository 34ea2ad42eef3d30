"""
Domain model exports.
"""

from civicsphere.domain.notices import NoticePipelineResult, ProcessedNotice, importance_for

__all__ = ["NoticePipelineResult", "ProcessedNotice", "importance_for"]
