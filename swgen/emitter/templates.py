"""JavaScript templates for the generated service worker.

Each template is a fixed string; the only variable parts are the constants
block, which the renderer builds from the manifest, and the handful of
__PLACEHOLDER__ tokens filled by fill(). Nothing here is mutated at runtime.
"""

import re

_TOKEN = re.compile(r"__([A-Z][A-Z_]*?)__")

HEADER = """\
/* ts:__TIMESTAMP__ */
"use strict";
"""

CONSTANTS = """\
const CACHE_NAME = __CACHE_NAME__;
const CACHE_FIRST = __CACHE_FIRST__;
const ON_DEMAND = __ON_DEMAND__;
const PERSIST_ON_DEMAND = __PERSIST_ON_DEMAND__;
const REFRESH_FILES = __REFRESH_FILES__;
const FALLBACK_PATTERNS = __FALLBACK_PATTERNS__;
const CLEANUP_CACHES = __CLEANUP_CACHES__;
const CLEANUP_FILES = __CLEANUP_FILES__;
"""

COMMUNICATIONS = """\
const knownClients = new Map();

function rememberClient(client) {
    if (client && client.id) {
        knownClients.set(client.id, client);
    }
}

async function broadcast(type, ...data) {
    const message = JSON.stringify({ type, data });
    const clients = await self.clients.matchAll({ includeUncontrolled: true });
    const live = new Set(clients.map((client) => client.id));
    for (const id of [...knownClients.keys()]) {
        if (!live.has(id)) {
            knownClients.delete(id);
        }
    }
    clients.forEach(rememberClient);

    for (const [id, client] of knownClients) {
        try {
            client.postMessage(message);
        } catch (err) {
            knownClients.delete(id);
        }
    }
}

function log(...data) {
    return broadcast("msg", ...data);
}

function matchesAny(url, paths) {
    return paths.some((path) => url.endsWith(path));
}

self.addEventListener("message", (event) => {
    rememberClient(event.source);

    if (event.data === "__SKIP_WAITING__") {
        event.waitUntil(self.skipWaiting().then(() => log("__WAIT_FINISHED__")));
    }
});
"""

INSTALL = """\
self.addEventListener("install", (event) => {
    event.waitUntil((async () => {
        const cache = await caches.open(CACHE_NAME);
        await cache.addAll(CACHE_FIRST);
        await broadcast("__INSTALL_DONE__");
    })());
});
"""

ACTIVATE = """\
self.addEventListener("activate", (event) => {
    event.waitUntil((async () => {
        await Promise.all(CLEANUP_CACHES.map((name) => caches.delete(name)));

        const purge = CLEANUP_FILES.concat(PERSIST_ON_DEMAND ? REFRESH_FILES : ON_DEMAND);
        if (purge.length) {
            const cache = await caches.open(CACHE_NAME);
            for (const request of await cache.keys()) {
                if (matchesAny(request.url, purge)) {
                    await cache.delete(request);
                }
            }
        }

        await self.clients.claim();
        await broadcast("__ACTIVATION_DONE__");
    })());
});
"""

FETCH = """\
async function cacheOrFetch(request) {
    const cache = await caches.open(CACHE_NAME);
    const cached = await cache.match(request);
    if (cached) {
        return cached;
    }

    log(`'${request.url}' is not cached yet, fetching ...`);
    let response;
    try {
        response = await fetch(request.clone());
    } catch (err) {
        return patternFallback(request, undefined);
    }

    if (response.status === 200) {
        await cache.put(request, response.clone());
        return response;
    }
    return patternFallback(request, response);
}

async function handleRequest(request) {
    if (matchesAny(request.url, CACHE_FIRST) || matchesAny(request.url, ON_DEMAND)) {
        return cacheOrFetch(request);
    }

    let response;
    try {
        response = await fetch(request.clone());
    } catch (err) {
        return patternFallback(request, undefined);
    }
    return patternFallback(request, response);
}

self.addEventListener("fetch", (event) => {
    if (event.request.method !== "GET") {
        return;
    }
    event.respondWith(handleRequest(event.request));
});
"""

PATTERN_FALLBACK = """\
async function patternFallback(request, response) {
    if (response && /^[23]\\d\\d$/.test(String(response.status))) {
        return response;
    }

    for (const [pattern, file] of FALLBACK_PATTERNS) {
        if (new RegExp(pattern, "i").test(request.url)) {
            const cache = await caches.open(CACHE_NAME);
            const substitute = await cache.match(file);
            if (substitute) {
                return substitute;
            }
            break;
        }
    }

    return response || Response.error();
}
"""

NO_PATTERN_FALLBACK = """\
async function patternFallback(request, response) {
    return response || Response.error();
}
"""


def fill(template: str, **values: str) -> str:
    """Replace __KEY__ tokens in template with the given values, in one pass.

    Tokens without a value are left as they are.
    """
    return _TOKEN.sub(lambda m: values.get(m.group(1), m.group(0)), template)
