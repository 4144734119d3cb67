"""
Parsing of secret environment variables given as key=value lines.
"""

from typing import Dict, Optional

from ..errors import ConfigurationError
from ..security.sanitizer import InputSanitizer, SecurityError


def parse_key_value_pairs(text: Optional[str]) -> Dict[str, str]:
    """
    Parse newline separated key=value pairs.

    Blank lines and lines starting with '#' are skipped. Keys and values
    are stripped; a value may itself contain '='. Later keys override
    earlier ones.

    Raises:
        ConfigurationError: If a line has no '=' or the key is not a valid
            environment variable name
    """
    pairs: Dict[str, str] = {}
    if not text:
        return pairs

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        if not sep:
            raise ConfigurationError(
                f"Invalid key=value pair on line {line_number}: missing '='"
            )

        key = key.strip()
        try:
            InputSanitizer.sanitize_env_var_name(key)
        except SecurityError as e:
            raise ConfigurationError(f"Line {line_number}: {e}") from e

        pairs[key] = value.strip()

    return pairs
