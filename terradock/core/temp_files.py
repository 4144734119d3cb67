"""
Temporary file lifecycle for Terraform variable files.

Variable files may hold secrets, so they are created owner-only and
shredded (overwritten, then deleted) as soon as the container exits.
"""

import logging
import os
import tempfile
import uuid
from typing import Any, Mapping, Optional, Union

from ..errors import VarFileWriteError
from .tfvars_handler import TfvarsHandler

logger = logging.getLogger(__name__)

DEFAULT_TEMP_PREFIX = "terradock-"

_SHRED_CHUNK_SIZE = 64 * 1024


def generate_random_temporary_path(prefix: Optional[str] = None) -> str:
    """
    Return a unique path under the system temp directory.

    The path is not created.
    """
    name = f"{prefix if prefix is not None else DEFAULT_TEMP_PREFIX}{uuid.uuid4().hex}"
    return os.path.join(tempfile.gettempdir(), name)


def save_to_random_temporary_file(
    data: Union[Mapping[str, Any], str],
    prefix: Optional[str] = None,
) -> str:
    """
    Write variable definitions to a fresh temporary .tfvars file.

    Args:
        data: Mapping of variable name to value, or raw HCL text
        prefix: Optional file name prefix

    Returns:
        Path of the written file

    Raises:
        VarFileWriteError: If the file cannot be written
        ConfigurationError: If a variable name is invalid
    """
    if isinstance(data, str):
        content = data
    else:
        content = TfvarsHandler.render_tfvars(data)

    path = generate_random_temporary_path(prefix)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise VarFileWriteError(f"Failed to write variable file {path}: {e}") from e

    logger.debug(f"Wrote variable file {path}")
    return path


def shred_terraform_var_file(path: str, passes: int = 1) -> None:
    """
    Overwrite a file with random bytes and delete it.

    Never raises: a missing file is ignored and other OS errors are
    logged, so cleanup cannot mask the result of the command.

    Args:
        path: File to destroy
        passes: Number of overwrite passes
    """
    try:
        size = os.path.getsize(path)
        with open(path, "r+b") as f:
            for _ in range(max(passes, 1)):
                f.seek(0)
                remaining = size
                while remaining > 0:
                    chunk = min(remaining, _SHRED_CHUNK_SIZE)
                    f.write(os.urandom(chunk))
                    remaining -= chunk
                f.flush()
                os.fsync(f.fileno())
        os.remove(path)
    except FileNotFoundError:
        logger.debug(f"Variable file already removed: {path}")
        return
    except OSError as e:
        logger.error(f"Failed to shred variable file {path}: {e}")
        try:
            os.remove(path)
        except OSError:
            pass
        return

    logger.debug(f"Shredded variable file {path}")
