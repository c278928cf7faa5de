"""Tests for reconciling local and remote enumerations."""

from conftest import snapshot

from pycync.sync import (
    FileSnapshot,
    LocalOnly,
    Present,
    RemoteOnly,
    reconcile,
    split_sides,
    summarize,
)


class TestReconcile:
    """Tests for the reconcile function."""

    def test_both_empty(self):
        """Empty inputs produce an empty map."""
        assert reconcile({}, {}) == {}

    def test_local_only_file(self):
        """A file only on disk is classified LocalOnly."""
        local = {"a.txt": FileSnapshot("D1", b"one")}

        files = reconcile(local, {})

        assert files == {"a.txt": LocalOnly(digest="D1", contents=b"one")}

    def test_remote_only_file(self):
        """A file only in the bucket is classified RemoteOnly."""
        remote = {"a.txt": FileSnapshot("D1", b"one")}

        files = reconcile({}, remote)

        assert files == {"a.txt": RemoteOnly(digest="D1", contents=b"one")}

    def test_disjoint_key_sets(self):
        """Disjoint inputs produce one entry per key, each one-sided."""
        local = {f"local/{i}.txt": snapshot(b"l%d" % i) for i in range(5)}
        remote = {f"remote/{i}.txt": snapshot(b"r%d" % i) for i in range(3)}

        files = reconcile(local, remote)

        assert len(files) == len(local) + len(remote)
        for path in local:
            assert isinstance(files[path], LocalOnly)
        for path in remote:
            assert isinstance(files[path], RemoteOnly)

    def test_identical_file_on_both_sides(self):
        """Equal digests give an identical Present entry."""
        local = {"a.txt": FileSnapshot("D1", b"one")}
        remote = {"a.txt": FileSnapshot("D1", b"one")}

        state = reconcile(local, remote)["a.txt"]

        assert isinstance(state, Present)
        assert state.local_digest == state.remote_digest == "D1"
        assert state.is_identical

    def test_modified_file_keeps_both_sides(self):
        """Differing digests are attached verbatim to each side."""
        local = {"a.txt": FileSnapshot("D1", b"local")}
        remote = {"a.txt": FileSnapshot("D2", b"remote")}

        state = reconcile(local, remote)["a.txt"]

        assert state == Present(
            local_digest="D1",
            local_contents=b"local",
            remote_digest="D2",
            remote_contents=b"remote",
        )
        assert not state.is_identical

    def test_digests_are_not_recomputed(self):
        """Digests come from the source maps even if they do not match contents."""
        local = {"a.txt": FileSnapshot("not-a-real-digest", b"x")}

        assert reconcile(local, {})["a.txt"].digest == "not-a-real-digest"

    def test_output_ordered_by_path(self):
        """Output is sorted lexicographically regardless of input order."""
        local = {"z.txt": snapshot(b"z"), "b/c.txt": snapshot(b"c")}
        remote = {"a.txt": snapshot(b"a"), "b/a.txt": snapshot(b"ba")}

        assert list(reconcile(local, remote)) == [
            "a.txt",
            "b/a.txt",
            "b/c.txt",
            "z.txt",
        ]

    def test_idempotent(self):
        """Calling twice with the same inputs gives the same result and order."""
        local = {"b.txt": snapshot(b"1"), "a.txt": snapshot(b"2")}
        remote = {"a.txt": snapshot(b"3"), "c.txt": snapshot(b"4")}

        first = reconcile(local, remote)
        second = reconcile(local, remote)

        assert first == second
        assert list(first) == list(second)

    def test_inputs_not_mutated(self):
        """Reconciliation has no side effects on its inputs."""
        local = {"a.txt": snapshot(b"1")}
        remote = {"b.txt": snapshot(b"2")}

        reconcile(local, remote)

        assert local == {"a.txt": snapshot(b"1")}
        assert remote == {"b.txt": snapshot(b"2")}


class TestMergeAcrossScans:
    """Tests for merging a previous result with a new reading of one side."""

    def test_remote_only_becomes_present_with_original_remote(self):
        """A previously remote-only path keeps its remote side when seen locally."""
        previous = reconcile({}, {"a.txt": FileSnapshot("R1", b"remote")})
        _, remote = split_sides(previous)
        new_local = {"a.txt": FileSnapshot("L1", b"local")}

        state = reconcile(new_local, remote)["a.txt"]

        assert state == Present(
            local_digest="L1",
            local_contents=b"local",
            remote_digest="R1",
            remote_contents=b"remote",
        )

    def test_split_sides_round_trip(self):
        """Splitting a result and reconciling again yields the same map."""
        files = reconcile(
            {"a.txt": snapshot(b"a"), "b.txt": snapshot(b"b")},
            {"b.txt": snapshot(b"B"), "c.txt": snapshot(b"c")},
        )

        assert reconcile(*split_sides(files)) == files


class TestSummarize:
    """Tests for the summarize function."""

    def test_counts_each_category(self):
        files = reconcile(
            {
                "local.txt": snapshot(b"l"),
                "same.txt": snapshot(b"s"),
                "changed.txt": snapshot(b"old"),
            },
            {
                "remote.txt": snapshot(b"r"),
                "same.txt": snapshot(b"s"),
                "changed.txt": snapshot(b"new"),
            },
        )

        assert summarize(files) == {
            "local_only": 1,
            "remote_only": 1,
            "identical": 1,
            "modified": 1,
        }
