"""Tests for the in-memory overlay filesystem."""

import pytest

from modresolve.fs.in_memory import InMemoryFileSystem


@pytest.fixture
def overlay(memory_system):
    sys = memory_system(files={"/project/src/index.ts": "disk", "/project/package.json": "{}"})
    return InMemoryFileSystem(sys)


@pytest.mark.asyncio
class TestInMemoryFileSystem:
    async def test_stat_reads_through_to_system(self, overlay):
        stat = await overlay.stat("/project/src/index.ts")
        assert stat.is_file
        assert not stat.is_directory

        stat = await overlay.stat("/project/src")
        assert stat.is_directory

        stat = await overlay.stat("/project/missing.ts")
        assert not stat.is_file
        assert not stat.is_directory

    async def test_stat_is_cached(self, overlay):
        await overlay.stat("/project/src/index.ts")
        await overlay.stat("/project/src/index.ts")
        assert overlay.sys.stat_calls.count("/project/src/index.ts") == 1

    async def test_read_through_and_missing(self, overlay):
        assert await overlay.read_file("/project/src/index.ts") == "disk"
        assert await overlay.read_file("/project/nope.ts") is None

    async def test_read_miss_on_directory_keeps_directory(self, overlay):
        assert await overlay.read_file("/project/src") is None
        assert (await overlay.stat("/project/src")).is_directory

    async def test_write_shadows_disk(self, overlay):
        changed = await overlay.write_file("/project/src/index.ts", "memory")
        assert changed
        assert await overlay.read_file("/project/src/index.ts") == "memory"
        assert not await overlay.write_file("/project/src/index.ts", "memory")

    async def test_write_creates_parent_directories(self, overlay):
        await overlay.write_file("/project/generated/deep/x.js", "")
        assert (await overlay.stat("/project/generated/deep")).is_directory
        assert (await overlay.stat("/project/generated")).is_directory
        assert (await overlay.stat("/project/generated/deep/x.js")).is_file

    async def test_remove_hides_disk_file(self, overlay):
        await overlay.remove("/project/src/index.ts")
        assert await overlay.read_file("/project/src/index.ts") is None
        assert not (await overlay.stat("/project/src/index.ts")).is_file
        assert not await overlay.access("/project/src/index.ts")

    async def test_remove_directory_hides_children(self, overlay):
        await overlay.write_file("/project/tmp/a.js", "a")
        await overlay.remove("/project/tmp")
        assert await overlay.read_file("/project/tmp/a.js") is None
        assert not (await overlay.stat("/project/tmp")).is_directory

    async def test_flush_writes_pending_files(self, overlay):
        await overlay.write_file("/project/out/b.js", "b")
        await overlay.write_file("/project/out/a.js", "a")

        written = await overlay.flush()

        assert written == ["/project/out/a.js", "/project/out/b.js"]
        assert overlay.sys.writes == {"/project/out/a.js": "a", "/project/out/b.js": "b"}
        assert await overlay.flush() == []

    async def test_clear_file_cache_rereads_system(self, overlay):
        await overlay.stat("/project/src/index.ts")
        overlay.clear_file_cache("/project/src/index.ts")
        await overlay.stat("/project/src/index.ts")
        assert overlay.sys.stat_calls.count("/project/src/index.ts") == 2

    async def test_clear_cache(self, overlay):
        await overlay.write_file("/project/x.js", "x")
        overlay.clear_cache()
        assert overlay.items == {}
        assert await overlay.read_file("/project/x.js") is None

    async def test_paths_are_normalized(self, overlay):
        await overlay.write_file("\\project\\win\\x.js", "x")
        assert await overlay.read_file("/project/win/x.js") == "x"
