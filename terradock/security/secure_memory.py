"""
Secure handling of secret environment values.

- SecureString: Container for sensitive strings with explicit cleanup
- OutputRedactor: Redacts secret values from Terraform output
"""

from typing import List, Mapping, Optional

REDACTED = "[REDACTED]"


class SecureString:
    """
    Container for a sensitive string.

    The value never appears in str() or repr(), so a SecureString can be
    logged or put in an exception message without leaking it.

    Example:
        >>> token = SecureString("my_secret_token")
        >>> token.get_value()
        'my_secret_token'
        >>> token.clear()
    """

    def __init__(self, value: str):
        self._value: Optional[str] = value
        self._cleared = False

    def __del__(self):
        self.clear()

    def __str__(self) -> str:
        return REDACTED

    def __repr__(self) -> str:
        return f"SecureString({REDACTED})"

    def get_value(self) -> str:
        """
        Get the actual sensitive value.

        Raises:
            ValueError: If value has been cleared
        """
        if self._cleared or self._value is None:
            raise ValueError("SecureString value has been cleared")
        return self._value

    def clear(self):
        """Drop the value. Safe to call more than once."""
        self._value = None
        self._cleared = True


class OutputRedactor:
    """
    Redacts sensitive values from text output.

    Example:
        >>> redactor = OutputRedactor({"TF_TOKEN": SecureString("secret123")})
        >>> redactor.redact("Connecting with key: secret123")
        'Connecting with key: [REDACTED]'
    """

    def __init__(self, sensitive_variables: Optional[Mapping[str, SecureString]] = None):
        self.sensitive_values: List[str] = []

        if sensitive_variables:
            self.add_sensitive_values(sensitive_variables)

    @classmethod
    def from_plain_values(cls, values: Mapping[str, str]) -> "OutputRedactor":
        """Build a redactor from a plain name-to-value mapping."""
        return cls({name: SecureString(value) for name, value in values.items()})

    def add_sensitive_values(self, sensitive_variables: Mapping[str, SecureString]):
        """
        Add sensitive values to the redaction list.

        Args:
            sensitive_variables: Mapping of variable names to SecureString values
        """
        for secure_str in sensitive_variables.values():
            if not isinstance(secure_str, SecureString):
                continue
            try:
                value = secure_str.get_value()
            except ValueError:
                continue
            if value:
                self.sensitive_values.append(value)

        # Longest first so a secret containing another is fully masked
        self.sensitive_values.sort(key=len, reverse=True)

    def redact(self, text: str) -> str:
        """
        Replace every occurrence of a sensitive value with [REDACTED].

        Uses plain string replacement, not regex.
        """
        if not text:
            return text

        redacted = text
        for sensitive_value in self.sensitive_values:
            redacted = redacted.replace(sensitive_value, REDACTED)

        return redacted

    def clear(self):
        """Forget all sensitive values."""
        self.sensitive_values.clear()
