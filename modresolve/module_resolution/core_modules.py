"""Built-in runtime module names that resolve to themselves."""

NODE_PREFIX = "node:"

CORE_MODULES = frozenset(
    {
        "assert",
        "assert/strict",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "dns/promises",
        "domain",
        "events",
        "fs",
        "fs/promises",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "path/posix",
        "path/win32",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "readline/promises",
        "repl",
        "stream",
        "stream/consumers",
        "stream/promises",
        "stream/web",
        "string_decoder",
        "sys",
        "timers",
        "timers/promises",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "util/types",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

# Only reachable through the `node:` scheme
PREFIX_ONLY_MODULES = frozenset({"sea", "sqlite", "test", "test/reporters"})


def is_core(module_id: str) -> bool:
    if module_id.startswith(NODE_PREFIX):
        name = module_id[len(NODE_PREFIX) :]
        return name in CORE_MODULES or name in PREFIX_ONLY_MODULES
    return module_id in CORE_MODULES
