"""
elfdecode Shared Module
=======================

Configuration, structured logging and console presentation shared by the
elfdecode decoder, engine, reporters and command-line interface.
"""

from shared.config import ElfDecodeConfig, get_config

__all__ = ["ElfDecodeConfig", "get_config"]
