"""Structured logging tests."""

from octo_obs.logging import REDACTED, redact_secrets


def test_credentials_are_masked():
    event = redact_secrets(
        None,
        "info",
        {
            "event": "chat_turn",
            "github_token": "ghp_secret",
            "ANTHROPIC_API_KEY": "sk-ant",
            "authorization": "Bearer ghp_secret",
            "chat_id": "abc",
        },
    )

    assert event["github_token"] == REDACTED
    assert event["ANTHROPIC_API_KEY"] == REDACTED
    assert event["authorization"] == REDACTED
    assert event["chat_id"] == "abc"
    assert event["event"] == "chat_turn"


def test_empty_values_left_alone():
    assert redact_secrets(None, "info", {"token": ""}) == {"token": ""}
