"""
wordbank - personal vocabulary library with spaced repetition review.
"""

__version__ = "0.1.0"
