"""
Decoding of Terraform JSON output.

`terraform plan -json` and friends print one JSON object per line,
while `show -json`, `output -json` and `version -json` print a single
document. Both shapes are accepted.
"""

import json
from typing import Any

from ..errors import OutputParseError


def parse_terraform_json_output(text: str) -> Any:
    """
    Parse Terraform JSON output.

    Returns the decoded document for single-document output, or a list of
    decoded objects for newline-delimited output. Empty output yields an
    empty list.

    Raises:
        OutputParseError: If the text is neither one JSON document nor
            JSON on every non-blank line
    """
    stripped = text.strip()
    if not stripped:
        return []

    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    documents = []
    for line_number, line in enumerate(stripped.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            documents.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise OutputParseError(
                f"Terraform output is not valid JSON (line {line_number}: {e.msg})",
                output=text,
            ) from e
    return documents


def try_parse_terraform_json_output(text: str) -> Any:
    """Like parse_terraform_json_output, but return the text unchanged on failure."""
    try:
        return parse_terraform_json_output(text)
    except OutputParseError:
        return text
