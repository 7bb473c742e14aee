"""
markwise - Answer Script Evaluation Engine

Matches student answers to a model answer key, scores them with a remote
semantic scorer, and aggregates batch statistics.
"""

__version__ = "1.0.0"
