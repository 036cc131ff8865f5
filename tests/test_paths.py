import pytest

from cqlfs.paths import StaticRootResolver, break_down, full_path, owner_scope, relativize, resolve_owner_scope


def test_break_down():
    root = "/acme/app1/"
    assert break_down(root, "/acme/app1/docs/readme.txt") == ("/docs/", "readme.txt")
    assert break_down(root, "/acme/app1/a/b/c/file.tar.gz") == ("/a/b/c/", "file.tar.gz")
    assert break_down(root, "/acme/app1/readme.txt") == ("/", "readme.txt")
    assert break_down(root, "/acme/app1/docs/") == ("/docs/", "")
    assert break_down(root, "/acme/app1/") == ("/", "")
    assert break_down(root, "/acme/app1") == ("/", "")


def test_break_down_normalizes_slashes():
    assert break_down("/acme/app1/", "/acme/app1//docs//readme.txt") == ("/docs/", "readme.txt")


def test_relativize():
    assert relativize("/acme/app1/", "/acme/app1/docs/readme.txt") == "/docs/readme.txt"
    assert relativize("/acme/app1/", "/acme/app1/") == "/"
    with pytest.raises(ValueError):
        relativize("/acme/app1/", "/acme/app2/docs/readme.txt")
    with pytest.raises(ValueError):
        relativize("/acme/app1/", "/acme/app10/readme.txt")


def test_resolve_owner_scope():
    assert resolve_owner_scope("/acme/app1/") == ("acme", "app1")
    assert resolve_owner_scope("/acme/apps/app1/") == ("acme", "apps/app1")
    assert resolve_owner_scope("/acme/") == ("acme", "")
    with pytest.raises(ValueError):
        resolve_owner_scope("/")


def test_owner_scope():
    assert owner_scope("/acme/app1/") == "acme/app1"
    assert owner_scope("/acme/") == "acme"


def test_full_path():
    assert full_path("/acme/app1/", "/docs/", "a.txt") == "/acme/app1/docs/a.txt"
    assert full_path("/acme/app1/", "/", "a.txt") == "/acme/app1/a.txt"


def test_static_root_resolver():
    resolver = StaticRootResolver("/acme/app1/")
    assert resolver.root_folder == "/acme/app1/"
    assert resolver.owner_scope == "acme/app1"
    assert resolver.relative_path("/acme/app1/docs/a.txt") == "/docs/a.txt"
    with pytest.raises(ValueError):
        StaticRootResolver("/acme/app1")
    with pytest.raises(ValueError):
        StaticRootResolver("acme/app1/")
