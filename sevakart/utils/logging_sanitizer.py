"""
Redacts credentials from parsed request bodies before they are logged.
"""

from typing import Any


REDACTED = '[REDACTED]'

# Keys compared case-insensitively
SENSITIVE_FIELDS = frozenset({
    'password',
    'password_confirm',
    'confirm_password',
    'current_password',
    'new_password',
    'secret',
    'secret_key',
    'token',
    'api_key',
    'access_token',
    'refresh_token',
    'session_id',
    'csrf_token',
})


def _sanitize_value(value: Any, redact_text: str) -> Any:
    if isinstance(value, dict):
        return sanitize_dict(value, redact_text)
    if isinstance(value, list):
        return [_sanitize_value(item, redact_text) for item in value]
    return value


def sanitize_dict(data, redact_text: str = REDACTED):
    """
    Copy of `data` with the values of sensitive keys replaced by `redact_text`.
    Nested objects and lists of objects are sanitized too; falsy input is
    returned as is.

    Example:
        >>> sanitize_dict({'username': 'ravi', 'password': 'secret123'})
        {'username': 'ravi', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    return {
        key: redact_text if str(key).lower() in SENSITIVE_FIELDS else _sanitize_value(value, redact_text)
        for key, value in data.items()
    }
