"""
CLI Module

Rich output helpers for the command-line interface.
"""
