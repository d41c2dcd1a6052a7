"""Tests for LocalFileStore and StaticListingFileStore."""

from __future__ import annotations

import pytest

from smol_workspace.infra.errors import (
    AccessDeniedError,
    FileNotFoundInStoreError,
    FileStoreError,
)
from smol_workspace.workspace.file_store import LocalFileStore, StaticListingFileStore


class TestLocalFileStoreList:
    def test_lists_nested_files_sorted(self, store):
        assert store.list() == ["index.html", "src/app.js"]

    def test_skips_vcs_and_cache_dirs(self, store, workspace):
        (workspace / ".git").mkdir()
        (workspace / ".git" / "HEAD").write_text("ref", encoding="utf-8")
        (workspace / "node_modules").mkdir()
        (workspace / "node_modules" / "x.js").write_text("", encoding="utf-8")
        assert store.list() == ["index.html", "src/app.js"]

    def test_empty_root(self, tmp_path):
        assert LocalFileStore(tmp_path).list() == []


class TestLocalFileStoreReadWrite:
    def test_read_existing(self, store):
        assert store.read("index.html") == "<h1>hello</h1>"

    def test_read_dot_slash_path(self, store):
        assert store.read("./src/app.js") == "console.log('foo');\n"

    def test_read_missing_raises_not_found(self, store):
        with pytest.raises(FileNotFoundInStoreError) as exc_info:
            store.read("missing.txt")
        assert exc_info.value.code == "FILE_NOT_FOUND"

    def test_write_creates_parents(self, store, workspace):
        store.write("docs/guide/intro.md", "# Intro")
        assert (workspace / "docs" / "guide" / "intro.md").read_text(encoding="utf-8") == "# Intro"

    def test_write_replaces_content(self, store):
        store.write("index.html", "new")
        assert store.read("index.html") == "new"

    def test_write_utf8(self, store):
        store.write("unicode.txt", "héllo — 世界")
        assert store.read("unicode.txt") == "héllo — 世界"

    def test_write_onto_directory_fails(self, store):
        with pytest.raises(FileStoreError):
            store.write("src", "oops")

    def test_read_non_utf8_is_io_error(self, store, workspace):
        (workspace / "blob.bin").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(FileStoreError) as exc_info:
            store.read("blob.bin")
        assert exc_info.value.code == "IO_ERROR"


class TestLocalFileStoreDelete:
    def test_delete_existing(self, store, workspace):
        store.delete("index.html")
        assert not (workspace / "index.html").exists()
        assert not store.exists("index.html")

    def test_delete_missing_raises_not_found(self, store):
        with pytest.raises(FileNotFoundInStoreError):
            store.delete("nope.txt")

    def test_delete_directory_is_not_found(self, store):
        with pytest.raises(FileNotFoundInStoreError):
            store.delete("src")

    def test_delete_symlink_removes_link_not_target(self, store, workspace):
        (workspace / "alias.html").symlink_to(workspace / "index.html")
        store.delete("alias.html")
        assert not (workspace / "alias.html").is_symlink()
        assert (workspace / "index.html").read_text(encoding="utf-8") == "<h1>hello</h1>"

    def test_delete_symlink_pointing_outside(self, store, workspace, tmp_path):
        outside = tmp_path / "secret.txt"
        outside.write_text("keep", encoding="utf-8")
        (workspace / "link.txt").symlink_to(outside)
        store.delete("link.txt")
        assert not (workspace / "link.txt").is_symlink()
        assert outside.read_text(encoding="utf-8") == "keep"

    def test_delete_dangling_symlink(self, store, workspace):
        (workspace / "dangling").symlink_to(workspace / "gone.txt")
        store.delete("dangling")
        assert not (workspace / "dangling").is_symlink()

    def test_delete_escape_rejected(self, store, tmp_path):
        (tmp_path / "victim.txt").write_text("x", encoding="utf-8")
        with pytest.raises(AccessDeniedError):
            store.delete("../victim.txt")
        assert (tmp_path / "victim.txt").exists()


class TestLocalFileStoreBoundary:
    @pytest.mark.parametrize("path", ["/etc/passwd", "../outside.txt", "src/../../x", ""])
    def test_rejected_paths(self, store, path):
        with pytest.raises(AccessDeniedError):
            store.read(path)

    def test_write_outside_rejected(self, store, tmp_path):
        with pytest.raises(AccessDeniedError):
            store.write("../escape.txt", "x")
        assert not (tmp_path / "escape.txt").exists()


class TestStaticListing:
    def test_listing_is_fixed(self, store):
        static = StaticListingFileStore(store, ["index.html"])
        assert static.list() == ["index.html"]

    def test_listing_ignores_writes_and_deletes(self, store):
        static = StaticListingFileStore(store, ["index.html"])
        static.write("new.txt", "x")
        static.delete("src/app.js")
        assert static.list() == ["index.html"]
        assert static.read("new.txt") == "x"
