"""Tests for resolve_module_id_async end to end over in-memory filesystems."""

import asyncio
import errno
import json

import pytest
from pydantic import ValidationError

from modresolve.errors import ModuleIdNotFoundError
from modresolve.errors import ResolveError
from modresolve.fs.in_memory import InMemoryFileSystem
from modresolve.models import NO_PACKAGE_FILTER
from modresolve.models import FileStat
from modresolve.models import ResolveModuleIdOptions
from modresolve.module_resolution import engine
from modresolve.module_resolution.resolve_module import default_package_filter
from modresolve.module_resolution.resolve_module import get_package_filter
from modresolve.module_resolution.resolve_module import resolve_module_id_async

CONTAINING_FILE = "/project/src/index.ts"


@pytest.fixture
def resolve_in(memory_system):
    """Resolve a module id against a file tree."""

    async def _resolve(files, module_id, **kwargs):
        sys = memory_system(
            files=files,
            links=kwargs.pop("links", None),
            realpath_errors=kwargs.pop("realpath_errors", None),
        )
        kwargs.setdefault("containing_file", CONTAINING_FILE)
        opts = ResolveModuleIdOptions(module_id=module_id, **kwargs)
        return await resolve_module_id_async(sys, InMemoryFileSystem(sys), opts)

    return _resolve


@pytest.mark.asyncio
class TestResolveModuleId:
    async def test_relative_widget(self, resolve_in):
        results = await resolve_in({"/project/src/widget.js": ""}, "./widget")

        assert results.module_id == "./widget"
        assert results.resolved_path == "/project/src/widget.js"
        assert results.pkg_data == {"name": "./widget", "version": "0.0.0"}
        assert results.pkg_dir_path == "/project/src"

    async def test_package_without_main_resolves_manifest(self, resolve_in):
        files = {"/project/node_modules/left-pad/package.json": json.dumps({"name": "left-pad"})}
        results = await resolve_in(files, "left-pad")

        assert results.resolved_path == "/project/node_modules/left-pad/package.json"
        assert results.pkg_data["name"] == "left-pad"
        assert results.pkg_data["version"] == "0.0.0"
        assert results.pkg_data["main"] == "package.json"
        assert results.pkg_dir_path == "/project/node_modules/left-pad"

    async def test_missing_package_names_module_id(self, resolve_in):
        with pytest.raises(ResolveError) as exc_info:
            await resolve_in({"/project/src/index.ts": ""}, "missing-pkg")
        assert "missing-pkg" in str(exc_info.value)
        assert exc_info.value.code == ResolveError.MODULE_NOT_FOUND

    async def test_nested_package_dir_is_package_root(self, resolve_in):
        files = {
            "/project/node_modules/ui-kit/package.json": json.dumps(
                {"name": "ui-kit", "version": "2.0.0", "main": "dist/esm/components/index.js"}
            ),
            "/project/node_modules/ui-kit/dist/esm/components/index.js": "",
        }
        results = await resolve_in(files, "ui-kit")

        assert results.resolved_path == "/project/node_modules/ui-kit/dist/esm/components/index.js"
        assert results.pkg_dir_path == "/project/node_modules/ui-kit"
        assert results.pkg_data["version"] == "2.0.0"

    async def test_scoped_sub_path_package_dir(self, resolve_in):
        files = {
            "/project/node_modules/@scope/pkg/package.json": json.dumps({"name": "@scope/pkg", "version": "1.0.0"}),
            "/project/node_modules/@scope/pkg/internal/client/index.js": "",
        }
        results = await resolve_in(files, "@scope/pkg/internal/client")

        assert results.resolved_path == "/project/node_modules/@scope/pkg/internal/client/index.js"
        assert results.pkg_dir_path == "/project/node_modules/@scope/pkg"

    async def test_extensions_are_honoured(self, resolve_in):
        files = {"/project/src/widget.tsx": "", "/project/src/widget.js": ""}
        results = await resolve_in(files, "./widget", exts=[".tsx", ".ts", ".js"])
        assert results.resolved_path == "/project/src/widget.tsx"

    async def test_custom_module_directory_package_root(self, resolve_in):
        files = {
            "/project/web_modules/ui/package.json": json.dumps({"name": "ui", "main": "dist/esm/index.js"}),
            "/project/web_modules/ui/dist/esm/index.js": "",
        }
        results = await resolve_in(files, "ui", module_directories=["web_modules"])

        assert results.resolved_path == "/project/web_modules/ui/dist/esm/index.js"
        assert results.pkg_dir_path == "/project/web_modules/ui"

    async def test_empty_extension_list_matches_exact_path_only(self, resolve_in):
        files = {"/project/src/widget.js": ""}
        with pytest.raises(ResolveError):
            await resolve_in(files, "./widget", exts=[])

        results = await resolve_in(files, "./widget.js", exts=[])
        assert results.resolved_path == "/project/src/widget.js"

    async def test_windows_style_containing_file(self, resolve_in):
        results = await resolve_in(
            {"C:/project/src/widget.js": ""},
            "./widget",
            containing_file="C:\\project\\src\\index.ts",
        )
        assert results.resolved_path == "C:/project/src/widget.js"
        assert results.pkg_dir_path == "C:/project/src"

    async def test_core_module(self, resolve_in):
        results = await resolve_in({}, "path")
        assert results.resolved_path == "path"
        assert results.pkg_dir_path is None
        assert results.pkg_data == {"name": "path", "version": "0.0.0"}

    async def test_results_are_immutable(self, resolve_in):
        results = await resolve_in({"/project/src/widget.js": ""}, "./widget")
        with pytest.raises(ValidationError):
            results.resolved_path = "/elsewhere"


@pytest.mark.asyncio
class TestPackageFilterPolicy:
    async def test_no_package_filter_disables_default(self, resolve_in):
        files = {"/project/node_modules/left-pad/package.json": json.dumps({"name": "left-pad"})}
        with pytest.raises(ResolveError):
            await resolve_in(files, "left-pad", package_filter=NO_PACKAGE_FILTER)

    async def test_explicit_filter_takes_precedence(self, resolve_in):
        calls = []

        def package_filter(pkg, pkg_file, pkg_dir):
            calls.append(pkg_file)
            pkg["main"] = "lib/left-pad.js"
            return pkg

        files = {
            "/project/node_modules/left-pad/package.json": json.dumps({"name": "left-pad"}),
            "/project/node_modules/left-pad/lib/left-pad.js": "",
        }
        results = await resolve_in(files, "left-pad", package_filter=package_filter)

        assert results.resolved_path == "/project/node_modules/left-pad/lib/left-pad.js"
        assert "/project/node_modules/left-pad/package.json" in calls

    async def test_default_filter_keeps_usable_main(self, resolve_in):
        files = {
            "/project/node_modules/dep/package.json": json.dumps({"name": "dep", "version": "3.1.0", "main": "main.js"}),
            "/project/node_modules/dep/main.js": "",
        }
        results = await resolve_in(files, "dep")
        assert results.resolved_path == "/project/node_modules/dep/main.js"
        assert results.pkg_data == {"name": "dep", "version": "3.1.0", "main": "main.js"}


def test_get_package_filter_policy():
    def custom(pkg, pkg_file, pkg_dir):
        return pkg

    assert get_package_filter(ResolveModuleIdOptions("x", CONTAINING_FILE)) is default_package_filter
    assert get_package_filter(ResolveModuleIdOptions("x", CONTAINING_FILE, package_filter=custom)) is custom
    assert get_package_filter(ResolveModuleIdOptions("x", CONTAINING_FILE, package_filter=NO_PACKAGE_FILTER)) is None


@pytest.mark.parametrize("main", [None, "", 7])
def test_default_package_filter_substitutes_manifest(main):
    pkg = {"name": "x"} if main is None else {"name": "x", "main": main}
    assert default_package_filter(pkg)["main"] == "package.json"


@pytest.mark.asyncio
class TestUntrustedEngineSuccess:
    @pytest.mark.parametrize("empty", [None, ""])
    async def test_success_without_path_is_not_found(self, resolve_in, monkeypatch, empty):
        async def fake_resolve(module_id, opts):
            return empty, {"name": "ghost"}

        monkeypatch.setattr(engine, "resolve", fake_resolve)

        with pytest.raises(ModuleIdNotFoundError) as exc_info:
            await resolve_in({}, "ghost-pkg")
        assert str(exc_info.value) == "Unable to resolve module: ghost-pkg"
        assert exc_info.value.module_id == "ghost-pkg"

    async def test_nothing_exists_anywhere(self):
        class EmptyFs:
            async def stat(self, path):
                return FileStat()

            async def read_file(self, path):
                return None

        class NoSystem(EmptyFs):
            async def realpath(self, path):
                raise AssertionError("realpath should not be needed")

        opts = ResolveModuleIdOptions(module_id="./widget", containing_file=CONTAINING_FILE)
        with pytest.raises(ResolveError):
            await resolve_module_id_async(NoSystem(), EmptyFs(), opts)


@pytest.mark.asyncio
class TestCanonicalization:
    async def test_missing_target_falls_back_to_original_path(self, memory_system):
        sys = memory_system()
        fs = InMemoryFileSystem(sys)
        await fs.write_file("/project/src/widget.js", "export {}")

        opts = ResolveModuleIdOptions(
            module_id="./widget",
            containing_file=CONTAINING_FILE,
            preserve_symlinks=False,
        )
        results = await resolve_module_id_async(sys, fs, opts)
        assert results.resolved_path == "/project/src/widget.js"

    async def test_other_realpath_errors_abort(self, resolve_in):
        denied = PermissionError(errno.EACCES, "Permission denied", "/project/src")
        with pytest.raises(PermissionError):
            await resolve_in(
                {"/project/src/widget.js": ""},
                "./widget",
                preserve_symlinks=False,
                realpath_errors={"/project/src": denied},
            )

    async def test_symlinked_package_is_canonicalized(self, resolve_in):
        results = await resolve_in(
            {"/project/packages/shared/index.js": ""},
            "./shared-link",
            links={"/project/src/shared-link.js": "/project/packages/shared/index.js"},
            preserve_symlinks=False,
        )
        assert results.resolved_path == "/project/packages/shared/index.js"


@pytest.mark.asyncio
async def test_concurrent_resolutions_share_a_filesystem(memory_system):
    sys = memory_system(
        files={
            "/project/src/a.js": "",
            "/project/src/b.js": "",
            "/project/node_modules/dep/index.js": "",
        }
    )
    fs = InMemoryFileSystem(sys)

    def opts(module_id):
        return ResolveModuleIdOptions(module_id=module_id, containing_file=CONTAINING_FILE)

    results = await asyncio.gather(
        resolve_module_id_async(sys, fs, opts("./a")),
        resolve_module_id_async(sys, fs, opts("./b")),
        resolve_module_id_async(sys, fs, opts("dep")),
        resolve_module_id_async(sys, fs, opts("./a")),
    )

    assert [r.resolved_path for r in results] == [
        "/project/src/a.js",
        "/project/src/b.js",
        "/project/node_modules/dep/index.js",
        "/project/src/a.js",
    ]
