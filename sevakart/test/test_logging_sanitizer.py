"""
Test the logging sanitizer utility.
Passwords and tokens must never reach the log files.
"""

from sevakart.utils.logging_sanitizer import SENSITIVE_FIELDS, sanitize_dict


def test_sanitize_dict():
    """Sensitive values are redacted, everything else passes through"""
    data = {
        'username': 'ramchaat',
        'password': 'secret123',
        'email': 'ram@example.com',
        'role': 'vendor',
    }
    result = sanitize_dict(data)
    assert result['username'] == 'ramchaat', "Username should not be redacted"
    assert result['password'] == '[REDACTED]', "Password should be redacted"
    assert result['email'] == 'ram@example.com'
    assert result['role'] == 'vendor'
    assert data['password'] == 'secret123', "Input should not be modified"


def test_sanitize_is_case_insensitive():
    result = sanitize_dict({'Password': 'a', 'CSRF_TOKEN': 'b'})
    assert result == {'Password': '[REDACTED]', 'CSRF_TOKEN': '[REDACTED]'}


def test_sanitize_nested_and_custom_text():
    result = sanitize_dict({'user': {'name': 'x', 'new_password': 'y'}}, redact_text='***')
    assert result == {'user': {'name': 'x', 'new_password': '***'}}


def test_sanitize_lists_of_objects():
    result = sanitize_dict({'accounts': [{'username': 'a', 'token': 't'}, 'plain']})
    assert result == {'accounts': [{'username': 'a', 'token': '[REDACTED]'}, 'plain']}


def test_sanitize_empty():
    assert sanitize_dict({}) == {}
    assert sanitize_dict(None) is None


def test_sensitive_fields_cover_credentials():
    for field in ('password', 'token', 'api_key', 'csrf_token', 'session_id'):
        assert field in SENSITIVE_FIELDS
