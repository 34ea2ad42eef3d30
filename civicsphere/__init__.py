"""
CivicSphere crawl-extract-classify pipeline.
"""
