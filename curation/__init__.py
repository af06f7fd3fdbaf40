"""
Heritage curation core.

User-owned collections of heritage content (artifacts, courses, quizzes, ...)
with progress tracking, collaboration, likes, comments and forking.
"""

__version__ = "0.1.0"
