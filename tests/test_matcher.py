import pytest
from yarl import URL

from cookie_dl.cookies.matcher import cookie_matches_url

from .conftest import make_cookie


@pytest.mark.parametrize(
    "domain, path, url, expected",
    [
        ("example.com", "/", "https://example.com/", True),
        (".example.com", "/", "https://sub.example.com/", True),
        ("example.com", "/", "https://sub.example.com/", True),
        ("example.com", "/", "https://sub.fexample.com/", False),
        ("example.com", "/", "https://different.com/", False),
        ("here.foo.com", "/", "https://there.here.foo.com/", True),
        ("here.foo.com", "/", "https://where.foo.com/", False),
        ("example.com", "/foo", "https://example.com/bar", False),
        ("example.com", "/foo", "https://example.com/foo/bar", True),
        ("example.com", "/api", "https://example.com/api/users", True),
        ("example.com", "/api", "https://example.com/public", False),
    ],
)
def test_cookie_matches_url(domain, path, url, expected):
    assert cookie_matches_url(make_cookie(domain, path), url) is expected


def test_path_is_a_plain_prefix():
    assert cookie_matches_url(make_cookie("example.com", "/foo"), "https://example.com/foobar")


def test_exact_host_equality_uses_raw_domain():
    assert cookie_matches_url(make_cookie("localhost"), "http://localhost:8080/x")


def test_leading_dot_cookie_does_not_match_bare_host():
    assert not cookie_matches_url(make_cookie(".example.com"), "https://example.com/")


def test_only_first_occurrence_of_domain_is_checked():
    # "foo.com" first appears at offset 0, which has no dot before it.
    assert not cookie_matches_url(make_cookie("foo.com"), "https://foo.com.foo.com/")


def test_url_without_host_never_matches():
    assert not cookie_matches_url(make_cookie("example.com"), "/just/a/path")


def test_accepts_yarl_url():
    url = URL("https://api.example.com/v1/items")
    assert cookie_matches_url(make_cookie(".example.com", "/v1"), url)
