import pytest
from pathlib import Path
from tiermedia.common.path.safe import normalize_object_path, resolve_root, safe_join


def test_resolve_root(tmp_path):
    p = resolve_root(tmp_path)
    assert isinstance(p, Path)
    assert p.exists()


def test_safe_join_inside(tmp_path):
    root = tmp_path
    rel = Path("a/b/c.txt")
    out = safe_join(root, rel)
    assert out.parent == root.resolve() / "a" / "b"
    assert str(out).startswith(str(root.resolve()))


def test_safe_join_leading_slash_stays_inside(tmp_path):
    out = safe_join(tmp_path, "/a/c.txt")
    assert out == tmp_path.resolve() / "a" / "c.txt"


def test_safe_join_escapes_rejected(tmp_path):
    root = tmp_path
    with pytest.raises(ValueError):
        safe_join(root, "../outside.txt")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("u1/b1/x.jpg", "u1/b1/x.jpg"),
        ("/u1/b1/x.jpg", "u1/b1/x.jpg"),
        ("u1//b1/./x.jpg", "u1/b1/x.jpg"),
        ("u1\\b1\\x.jpg", "u1/b1/x.jpg"),
    ],
)
def test_normalize_object_path(raw, expected):
    assert normalize_object_path(raw) == expected


@pytest.mark.parametrize("raw", ["", "/", "u1/../x.jpg", "..", None])
def test_normalize_object_path_rejects(raw):
    with pytest.raises(ValueError):
        normalize_object_path(raw)
