"""
CLI runner module.

Provides commands:
- serve: Review web interface
- reviewers: List reviewers / check the API connection
- summary: Screening progress for one reviewer
- init-config: Write a default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
