"""Tests for the S3 content store, using moto to mock S3."""

import os
from unittest.mock import Mock, patch

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from pycync.exceptions import FetchFailure, ObjectNotFound, PushFailure, SetupError
from pycync.store import S3ContentStore
from pycync.sync import LocalTreeScanner, RemoteOnly, SyncController, fetch_remote
from pycync.utils import compute_digest

BUCKET = "test-cync-bucket"


@pytest.fixture
def aws_env():
    """Fake credentials so boto3 never reaches real AWS."""
    with patch.dict(
        os.environ,
        {
            "AWS_ACCESS_KEY_ID": "test-key",
            "AWS_SECRET_ACCESS_KEY": "test-secret",
            "AWS_DEFAULT_REGION": "us-east-1",
        },
    ):
        yield


@pytest.fixture
def s3(aws_env):
    """Mock S3 with an existing bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


class TestListKeys:
    """Tests for S3ContentStore.list_keys."""

    def test_empty_bucket(self, s3):
        store = S3ContentStore(BUCKET, client=s3)

        assert list(store.list_keys()) == []

    def test_drains_all_pages(self, s3):
        for i in range(25):
            s3.put_object(Bucket=BUCKET, Key=f"file{i:02d}.txt", Body=b"x")
        store = S3ContentStore(BUCKET, client=s3, page_size=10)

        keys = list(store.list_keys())

        assert len(keys) == 25
        assert "file24.txt" in keys

    def test_skips_directory_markers(self, s3):
        s3.put_object(Bucket=BUCKET, Key="docs/", Body=b"")
        s3.put_object(Bucket=BUCKET, Key="docs/a.txt", Body=b"a")
        store = S3ContentStore(BUCKET, client=s3)

        assert list(store.list_keys()) == ["docs/a.txt"]

    def test_prefix_is_stripped(self, s3):
        s3.put_object(Bucket=BUCKET, Key="team/a.txt", Body=b"a")
        s3.put_object(Bucket=BUCKET, Key="other/b.txt", Body=b"b")
        store = S3ContentStore(BUCKET, prefix="team/", client=s3)

        assert list(store.list_keys()) == ["a.txt"]

    def test_missing_bucket_raises_fetch_failure(self, s3):
        store = S3ContentStore("no-such-bucket", client=s3)

        with pytest.raises(FetchFailure):
            list(store.list_keys())


class TestGetPut:
    """Tests for S3ContentStore.get and put."""

    def test_put_then_get(self, s3):
        store = S3ContentStore(BUCKET, client=s3)

        store.put("docs/a.txt", b"hello")

        assert store.get("docs/a.txt") == b"hello"
        body = s3.get_object(Bucket=BUCKET, Key="docs/a.txt")["Body"].read()
        assert body == b"hello"

    def test_put_with_prefix(self, s3):
        store = S3ContentStore(BUCKET, prefix="team", client=s3)

        store.put("a.txt", b"hello")

        assert s3.get_object(Bucket=BUCKET, Key="team/a.txt")["Body"].read() == b"hello"

    def test_get_missing_key(self, s3):
        store = S3ContentStore(BUCKET, client=s3)

        with pytest.raises(ObjectNotFound) as exc_info:
            store.get("missing.txt")

        assert exc_info.value.key == "missing.txt"

    def test_listed_keys_round_trip_verbatim(self, s3):
        """Keys with a leading or doubled slash are fetched under the same key."""
        s3.put_object(Bucket=BUCKET, Key="/a.txt", Body=b"leading")
        s3.put_object(Bucket=BUCKET, Key="docs//b.txt", Body=b"doubled")
        s3.put_object(Bucket=BUCKET, Key="ok.txt", Body=b"ok")
        store = S3ContentStore(BUCKET, client=s3)

        keys = sorted(store.list_keys())

        assert keys == ["/a.txt", "docs//b.txt", "ok.txt"]
        assert store.get("/a.txt") == b"leading"
        assert store.get("docs//b.txt") == b"doubled"

    def test_prefixed_key_with_leading_slash(self, s3):
        s3.put_object(Bucket=BUCKET, Key="team//a.txt", Body=b"x")
        store = S3ContentStore(BUCKET, prefix="team", client=s3)

        assert list(store.list_keys()) == ["/a.txt"]
        assert store.get("/a.txt") == b"x"

    def test_put_failure(self):
        client = Mock()
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        store = S3ContentStore(BUCKET, client=client)

        with pytest.raises(PushFailure) as exc_info:
            store.put("a.txt", b"x")

        assert exc_info.value.path == "a.txt"

    def test_get_other_error_is_fetch_failure(self):
        client = Mock()
        client.get_object.side_effect = ClientError(
            {"Error": {"Code": "InternalError", "Message": "boom"}}, "GetObject"
        )
        store = S3ContentStore(BUCKET, client=client)

        with pytest.raises(FetchFailure) as exc_info:
            store.get("a.txt")

        assert not isinstance(exc_info.value, ObjectNotFound)


class TestBucket:
    """Tests for bucket setup."""

    def test_bucket_exists(self, s3):
        assert S3ContentStore(BUCKET, client=s3).bucket_exists()

    def test_bucket_missing(self, s3):
        assert not S3ContentStore("new-bucket", client=s3).bucket_exists()

    def test_create_bucket(self, s3):
        store = S3ContentStore("new-bucket", client=s3)

        store.create_bucket()

        assert store.bucket_exists()

    def test_create_bucket_outside_us_east_1(self, aws_env):
        with mock_aws():
            client = boto3.client("s3", region_name="eu-west-1")
            store = S3ContentStore("eu-bucket", client=client)

            store.create_bucket()

            location = client.get_bucket_location(Bucket="eu-bucket")
            assert location["LocationConstraint"] == "eu-west-1"

    def test_create_bucket_failure(self):
        client = Mock()
        client.meta.region_name = "us-east-1"
        client.create_bucket.side_effect = ClientError(
            {"Error": {"Code": "BucketAlreadyExists", "Message": "taken"}},
            "CreateBucket",
        )

        with pytest.raises(SetupError):
            S3ContentStore("taken", client=client).create_bucket()


class TestFetchRemote:
    """Tests for fetching every object through the store."""

    def test_fetch_remote_reads_and_digests(self, s3):
        s3.put_object(Bucket=BUCKET, Key="a.txt", Body=b"one")
        s3.put_object(Bucket=BUCKET, Key="b/c.txt", Body=b"two")
        store = S3ContentStore(BUCKET, client=s3)

        remote = fetch_remote(store, max_workers=2)

        assert set(remote) == {"a.txt", "b/c.txt"}
        assert remote["a.txt"].digest == compute_digest(b"one")
        assert remote["b/c.txt"].contents == b"two"

    def test_fetch_remote_propagates_missing_object(self):
        """A key that vanishes after listing fails the fetch, it is not dropped."""
        store = Mock()
        store.list_keys.return_value = iter(["gone.txt"])
        store.get.side_effect = ObjectNotFound("Object not found: gone.txt", "gone.txt")

        with pytest.raises(FetchFailure):
            fetch_remote(store)

    def test_refresh_with_non_canonical_keys(self, s3, tmp_path):
        s3.put_object(Bucket=BUCKET, Key="/a.txt", Body=b"leading")
        s3.put_object(Bucket=BUCKET, Key="ok.txt", Body=b"ok")
        controller = SyncController(
            S3ContentStore(BUCKET, client=s3), LocalTreeScanner(tmp_path / "cync")
        )

        files = controller.refresh()

        assert files == {
            "/a.txt": RemoteOnly(compute_digest(b"leading"), b"leading"),
            "ok.txt": RemoteOnly(compute_digest(b"ok"), b"ok"),
        }
