import pytest

from routing.domains import resolve_domains
from routing.rewrite import (
    PassThrough,
    RedirectPermanent,
    RewriteOptions,
    RewriteUri,
    rewrite,
)

HOST = "www.example.com"
SPA = RewriteOptions(is_spa=True)
STATIC = RewriteOptions(is_spa=False)
APEX = dict(apex_redirect=True, apex_domain="example.com", www_domain="www.example.com")


@pytest.mark.parametrize("uri,expected", [
    ("/", RewriteUri("/index.html")),
    ("/foo/", RewriteUri("/foo/index.html")),
    ("/foo", RewriteUri("/index.html")),
    ("/deeply/nested/route", RewriteUri("/index.html")),
    ("/app.js", PassThrough()),
    ("/assets/logo.svg", PassThrough()),
    ("/index.html", PassThrough()),
])
def test_spa_routing(uri, expected):
    assert rewrite(uri, HOST, SPA) == expected


@pytest.mark.parametrize("uri,expected", [
    ("/", RewriteUri("/index.html")),
    ("/foo/", RewriteUri("/foo/index.html")),
    ("/foo", RewriteUri("/foo/index.html")),
    ("/docs/getting-started", RewriteUri("/docs/getting-started/index.html")),
    ("/app.js", PassThrough()),
    ("/about/index.html", PassThrough()),
])
def test_static_routing(uri, expected):
    assert rewrite(uri, HOST, STATIC) == expected


def test_extensionless_paths_diverge_between_modes():
    assert rewrite("/about", HOST, SPA) == RewriteUri("/index.html")
    assert rewrite("/about", HOST, STATIC) == RewriteUri("/about/index.html")


@pytest.mark.parametrize("is_spa", [True, False])
@pytest.mark.parametrize("uri", ["/path", "/", "/foo/", "/app.js"])
def test_apex_redirect_takes_precedence(is_spa, uri):
    options = RewriteOptions(is_spa=is_spa, **APEX)

    action = rewrite(uri, "example.com", options)

    assert action == RedirectPermanent(f"https://www.example.com{uri}")
    assert action.status == 301


def test_www_host_is_not_redirected():
    options = RewriteOptions(is_spa=True, **APEX)

    assert rewrite("/path", "www.example.com", options) == RewriteUri("/index.html")


def test_apex_host_is_ignored_when_redirect_inactive():
    options = RewriteOptions(is_spa=False, apex_domain="example.com", www_domain="www.example.com")

    assert rewrite("/path", "example.com", options) == RewriteUri("/path/index.html")


@pytest.mark.parametrize("options", [SPA, STATIC])
@pytest.mark.parametrize("uri", ["", "foo", "index.html"])
def test_malformed_uris_pass_through(options, uri):
    assert rewrite(uri, HOST, options) == PassThrough()


def test_options_from_apex_plan():
    options = RewriteOptions.from_plan(resolve_domains("example.com"), is_spa=True)

    assert options == RewriteOptions(
        is_spa=True,
        apex_redirect=True,
        apex_domain="example.com",
        www_domain="www.example.com"
    )


@pytest.mark.parametrize("domain", [None, "app.example.com", "www.example.com"])
def test_options_without_apex_never_redirect(domain):
    options = RewriteOptions.from_plan(resolve_domains(domain, "example.com"), is_spa=False)

    assert options.apex_redirect is False
    assert rewrite("/x", "example.com", options) == RewriteUri("/x/index.html")


def test_rewrite_is_referentially_transparent():
    options = RewriteOptions(is_spa=True, **APEX)
    results = {rewrite("/foo", HOST, options) for _ in range(3)}

    assert results == {RewriteUri("/index.html")}
