import pytest

from gscp.errors import InvalidRemotePath
from gscp.paths import Local, Remote, Stdio, classify, format_remote, is_gs_path, split_gs_path


def test_dash_is_stdio():
    assert classify("-") == Stdio()


@pytest.mark.parametrize(
    "path, bucket, key",
    [
        ("gs://bucket", "bucket", ""),
        ("gs://bucket/key.txt", "bucket", "key.txt"),
        ("gs://bucket1/a/b.txt", "bucket1", "a/b.txt"),
        ("gs://b/dir/", "b", "dir/"),
    ],
)
def test_remote_paths(path, bucket, key):
    location = classify(path)
    assert location == Remote(bucket, key)
    assert location.bucket + ("/" + location.key if location.key else "") == path[5:]


def test_trailing_slash_gives_empty_key():
    assert classify("gs://bucket/") == Remote("bucket", "")


@pytest.mark.parametrize(
    "path",
    ["/tmp/in.txt", "relative/file", "gs:/bucket/key", "GS://bucket/key", "s3://bucket/key", "--", "gs:", ""],
)
def test_everything_else_is_local(path):
    assert classify(path) == Local(path)


@pytest.mark.parametrize("path", ["gs://", "gs:///key"])
def test_empty_bucket_is_rejected(path):
    with pytest.raises(InvalidRemotePath) as excinfo:
        classify(path)
    assert excinfo.value.path == path


def test_split_keeps_slashes_in_key():
    assert split_gs_path("gs://bucket/a/b/c") == ("bucket", "a/b/c")


def test_is_gs_path_requires_more_than_prefix():
    assert not is_gs_path("gs://")
    assert is_gs_path("gs://b")


def test_format_remote_round_trips():
    for path in ["gs://bucket", "gs://bucket/a/b.txt"]:
        location = classify(path)
        assert format_remote(location.bucket, location.key) == path
        assert str(location) == path
