"""
terradock - run Terraform commands inside a Docker container.
"""

__version__ = "1.0.0"
