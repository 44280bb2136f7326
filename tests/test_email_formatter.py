from __future__ import annotations

import pytest

from build_notifier.config import ConfigurationError, StaticSiteConfiguration
from build_notifier.email_formatter import (
    build_email_body,
    build_email_subject,
    build_url,
    compose,
    resolve_from_address,
)
from build_notifier.models import Build, BuildFinished, BuildFixed, Project


def _build(output: str = "compiling...\n1 test failed\n") -> Build:
    return Build(project=Project(name="myproj"), label=5, failed=True, output=output)


def test_build_email_subject():
    assert build_email_subject(_build(), "failed") == "[CruiseControl] myproj build 5 failed"
    assert build_email_subject(_build(), "fixed", product_tag="CI") == "[CI] myproj build 5 fixed"


def test_build_url_does_not_double_slash():
    assert build_url("http://ci.example.com/", _build()) == "http://ci.example.com/builds/myproj/5"


def test_build_email_body_links_to_dashboard():
    text_body, html_body = build_email_body(_build(), "The build failed.", "http://www.my.com")
    assert "http://www.my.com/builds/myproj/5" in text_body
    assert '<a href="http://www.my.com/builds/myproj/5">' in html_body
    assert "1 test failed" not in text_body


def test_build_email_body_embeds_output_without_dashboard():
    text_body, html_body = build_email_body(_build("<b>boom</b>\n"), "The build failed.", None, "Configure it.")
    assert "<b>boom</b>" in text_body
    assert text_body.endswith("Configure it.")
    assert "&lt;b&gt;boom&lt;/b&gt;" in html_body


def test_blank_dashboard_url_counts_as_unset():
    text_body, _ = build_email_body(_build(), "The build failed.", "   ", "Configure it.")
    assert "/builds/" not in text_body
    assert "1 test failed" in text_body
    assert text_body.endswith("Configure it.")


def test_compose_failed_message():
    message = compose(BuildFinished(_build()), ["a@x.com", "a@x.com"], "ci@x.com", None)
    assert message.subject == "[CruiseControl] myproj build 5 failed"
    assert message.recipients == ("a@x.com", "a@x.com")
    assert message.from_email == "ci@x.com"
    assert message.body.startswith("The build failed.")
    assert message.html_body is not None
    assert "<title>[CruiseControl] myproj build 5 failed</title>" in message.html_body


def test_compose_fixed_message():
    message = compose(BuildFixed(_build(), None), ["a@x.com"], "ci@x.com", "http://www.my.com")
    assert message.subject == "[CruiseControl] myproj build 5 fixed"
    assert message.body.startswith("The build has been fixed.")


def test_resolve_from_address_prefers_notifier_value():
    config = StaticSiteConfiguration(from_address="central@foo.com")
    assert resolve_from_address("team@foo.com", config) == "team@foo.com"
    assert resolve_from_address(None, config) == "central@foo.com"
    assert resolve_from_address("", config) == "central@foo.com"


def test_resolve_from_address_raises_when_nothing_configured():
    with pytest.raises(ConfigurationError):
        resolve_from_address(None, StaticSiteConfiguration(from_address=" "))
