"""
Security module for terradock.

This module provides utilities for handling secret values and
validating inputs that reach the docker command line.
"""

from .sanitizer import InputSanitizer, SecurityError
from .secure_memory import SecureString, OutputRedactor

__all__ = ["InputSanitizer", "SecurityError", "SecureString", "OutputRedactor"]
