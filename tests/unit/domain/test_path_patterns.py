"""Unit tests for PathPattern allow-list matching."""

import pytest

from ruby_structure_linter.domain.path_patterns import PathPattern


@pytest.mark.parametrize(
    ("path", "pattern"),
    [
        ("app/models/payment.rb", "app/models/payment.rb"),
        ("/abs/project/app/models/payment.rb", "app/models/payment.rb"),
        ("app/models/concerns/x.rb", "app/models/**/*.rb"),
        ("app/models/x.rb", "app/models/**/*.rb"),
        ("spec/models/payment_spec.rb", "spec/**/*_spec.rb"),
        ("app/services/notification/mailer/deliver.rb", "app/services/notification/**/*.rb"),
        ("app/models/a.rb", "app/models/?.rb"),
        ("app\\models\\payment.rb", "app/models/*.rb"),
        ("./app/models/payment.rb", "app/models/*.rb"),
        ("lib/tasks/a.rake", "lib/**"),
    ],
)
def test_matches(path: str, pattern: str) -> None:
    assert PathPattern.matches(path, pattern)


@pytest.mark.parametrize(
    ("path", "pattern"),
    [
        ("app/controllers/payment_controller.rb", "app/models/**/*.rb"),
        ("app/models/concerns/x.rb", "app/models/*.rb"),
        ("app/models/ab.rb", "app/models/?.rb"),
        ("app/models/payment.rb.orig", "app/models/payment.rb"),
        ("spec/models/payment.rb", "spec/**/*_spec.rb"),
        ("other/app/models/x.rb", "app/models/**/*.rb"),
    ],
)
def test_does_not_match(path: str, pattern: str) -> None:
    assert not PathPattern.matches(path, pattern)


def test_character_class() -> None:
    assert PathPattern.matches("app/v1/x.rb", "app/v[12]/*.rb")
    assert not PathPattern.matches("app/v3/x.rb", "app/v[12]/*.rb")
    assert PathPattern.matches("app/v3/x.rb", "app/v[!12]/*.rb")


def test_any_match() -> None:
    patterns = ["app/models/payment.rb", "app/services/**/*.rb"]
    assert PathPattern.any_match("app/services/payment/service.rb", patterns)
    assert not PathPattern.any_match("app/controllers/x.rb", patterns)
    assert not PathPattern.any_match("app/models/payment.rb", [])


def test_normalize_path() -> None:
    assert PathPattern.normalize_path(".\\app\\x.rb") == "app/x.rb"
    assert PathPattern.normalize_path("././lib/a.rb") == "lib/a.rb"


@pytest.mark.parametrize(
    ("path", "outside"),
    [
        ("app/models/x.rb", False),
        ("./lib/a.rb", False),
        ("..hidden/a.rb", False),
        ("/srv/other/app/x.rb", True),
        ("../sibling/app/x.rb", True),
        ("C:\\work\\app\\x.rb", True),
    ],
)
def test_is_outside_root(path: str, outside: bool) -> None:
    assert PathPattern.is_outside_root(path) is outside
