from __future__ import annotations
import os, logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

from .services.cache import CacheConfigError, LRUCache
from .services.pokeapi import (
    PokemonNotFound, UpstreamUnavailable,
    close_client, fetch_pokemon_detail, fetch_pokemon_names, get_client,
)
from .utils import normalize_name

log = logging.getLogger("uvicorn.error")

SUGGESTIONS_KEY = "pokemon-suggestions"


def build_cache(capacity: str, ttl: str) -> LRUCache:
    # raw env strings in, CacheConfigError for anything unparseable
    try:
        cap = int(capacity)
    except (TypeError, ValueError):
        raise CacheConfigError(f"CACHE_CAPACITY must be an integer, got {capacity!r}") from None
    try:
        ttl_sec = float(ttl)
    except (TypeError, ValueError):
        raise CacheConfigError(f"CACHE_TTL_SEC must be a number, got {ttl!r}") from None
    return LRUCache(capacity=cap, ttl=ttl_sec)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_client()


app = FastAPI(title="pokedex-bridge", version="0.1.0", lifespan=lifespan)
app.state.cache = build_cache(os.getenv("CACHE_CAPACITY", "100"), os.getenv("CACHE_TTL_SEC", "600"))


def get_cache(request: Request) -> LRUCache:
    return request.app.state.cache


def get_http_client() -> httpx.AsyncClient:
    return get_client()


@app.get("/")
async def root():
    return {"ok": True, "service": "pokedex-bridge"}


@app.get("/health")
async def health(cache: LRUCache = Depends(get_cache)):
    return {"ok": True, "cache_size": len(cache)}


async def _lookup(name: str, cache: LRUCache, client: httpx.AsyncClient):
    key = normalize_name(name)
    if not key:
        return JSONResponse({"error": "Missing name"}, status_code=400)

    cached = cache.get(key)
    if cached is not None:
        return {"cached": True, **cached}

    log.debug("cache miss for %s", key)
    try:
        detail = await fetch_pokemon_detail(client, key)
    except PokemonNotFound as e:
        log.warning("pokemon lookup failed: %s", e)
        return JSONResponse({"error": "Pokémon not found", "message": str(e)}, status_code=404)

    cache.set(key, detail)
    return {"cached": False, **detail}


@app.get("/api/pokemon/{name}")
async def get_pokemon(
    name: str,
    cache: LRUCache = Depends(get_cache),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await _lookup(name, cache, client)


@app.get("/api/pokemon")
async def find_pokemon(
    name: str = Query("", description="Name or id, case-insensitive"),
    cache: LRUCache = Depends(get_cache),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await _lookup(name, cache, client)


@app.get("/api/pokemon-suggestions")
async def pokemon_suggestions(
    q: str = Query("", description="Name prefix filter"),
    limit: Optional[int] = Query(None, ge=1),
    cache: LRUCache = Depends(get_cache),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    names = cache.get(SUGGESTIONS_KEY)
    was_cached = names is not None
    if not was_cached:
        try:
            names = await fetch_pokemon_names(client)
        except UpstreamUnavailable as e:
            log.exception("suggestions failed")
            return JSONResponse({"error": "Unable to load suggestions", "message": str(e)}, status_code=500)
        # the full list is cached, filtering happens per request
        cache.set(SUGGESTIONS_KEY, names)

    prefix = normalize_name(q)
    if prefix:
        names = [n for n in names if n.startswith(prefix)]
    if limit is not None:
        names = names[:limit]
    return {"cached": was_cached, "names": names}
