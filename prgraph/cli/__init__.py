# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
prgraph CLI

Usage:
    prgraph decorate owner/repo 42
    prgraph config
"""

from .main import cli, main

__all__ = ['cli', 'main']
