"""
Upload Gate Package

Admission control for multipart file uploads: file-type filtering,
part/field/file counts and streaming size limits, plus a small Quart
service and storage strategies around it.
"""

__version__ = "1.0.0"
