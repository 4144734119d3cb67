#!/usr/bin/env python3
"""
terradock - Main entry point.

Runs a Terraform command inside a Docker container.
"""

from terradock.main import main


if __name__ == "__main__":
    main()
