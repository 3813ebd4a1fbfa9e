"""
Novel reader platform backend.

Serves novel metadata and search from MongoDB, chapter text and cover images
from a file tree, and user accounts with per-chapter comments.
"""

__version__ = "1.0.0"
