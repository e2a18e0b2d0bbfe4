"""
CLI Commands - Command implementations for the anisource CLI.
"""
