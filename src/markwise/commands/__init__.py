"""
Commands Module

Click commands registered on the markwise CLI group.
"""
