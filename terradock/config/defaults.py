"""
Default settings for terradock.

These are the default values used when no user configuration exists.
"""

DEFAULT_SETTINGS = {
    # Docker
    "docker_binary": "docker",
    "docker_image": "hashicorp/terraform:latest",

    # Temporary files
    "temp_prefix": "terradock-",
    "shred_passes": 1,

    # Seconds; None waits for the command to finish
    "process_timeout": None,

    # Logging
    "log_level": "INFO",
    "log_file": False,
}
