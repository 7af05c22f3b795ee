from logging_config import redact_secrets


def test_secret_keys_are_redacted():
    event = redact_secrets(
        None,
        "info",
        {
            "event": "Updating SugarCRM contact",
            "access_token": "abc",
            "headers": {"Authorization": "Bearer abc", "Accept": "application/json"},
            "record_id": "123",
        },
    )

    assert event["access_token"] == "[REDACTED]"
    assert event["headers"] == {"Authorization": "[REDACTED]", "Accept": "application/json"}
    assert event["record_id"] == "123"
