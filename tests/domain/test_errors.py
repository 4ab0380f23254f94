from shark.domain.errors import ConfigError, SharkError


def test_shark_error_has_message_and_details():
    err = ConfigError("boom", details={"x": 1}, hint="fix it")
    assert isinstance(err, SharkError)
    assert str(err) == "boom"
    assert err.details["x"] == 1
    assert err.hint == "fix it"
