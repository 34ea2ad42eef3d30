"""
civicsphere/services package marker.
"""

from civicsphere.services.notice_pipeline_service import (
    NoticePipelineService,
    build_summarizer,
    get_notice_pipeline_service,
)

__all__ = [
    "NoticePipelineService",
    "build_summarizer",
    "get_notice_pipeline_service",
]
