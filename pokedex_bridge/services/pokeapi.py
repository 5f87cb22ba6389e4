from __future__ import annotations
import os
import asyncio
import logging
import httpx
from typing import Any, Dict, List, Optional
from urllib.parse import quote
from ..utils import english_text, tenths

POKEAPI_BASE_URL = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2")
POKEAPI_TIMEOUT_SEC = float(os.getenv("POKEAPI_TIMEOUT_SEC", "10"))
MOVE_LIMIT = int(os.getenv("MOVE_LIMIT", "20"))
SUGGESTION_LIMIT = int(os.getenv("SUGGESTION_LIMIT", "2000"))

log = logging.getLogger("uvicorn.error")

_client: Optional[httpx.AsyncClient] = None


class PokeAPIError(Exception):
    pass


class PokemonNotFound(PokeAPIError):
    pass


class UpstreamUnavailable(PokeAPIError):
    pass


def get_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        _client = httpx.AsyncClient(base_url=POKEAPI_BASE_URL, timeout=POKEAPI_TIMEOUT_SEC)
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def fetch_json(client: httpx.AsyncClient, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
    log.debug("upstream GET %s %s", url, params or "")
    r = await client.get(url, params=params)
    r.raise_for_status()
    return r.json()


def _extract_chain(chain: Optional[Dict[str, Any]]) -> List[Dict[str, str]]:
    # follows only the first branch of each evolves_to
    evo = []
    current = chain
    while current:
        evo.append({"name": current["species"]["name"]})
        nxt = current.get("evolves_to") or []
        current = nxt[0] if nxt else None
    return evo


async def _fetch_move(client: httpx.AsyncClient, url: str) -> Dict[str, Any]:
    m = await fetch_json(client, url)
    return {
        "name": m["name"],
        "type": m["type"]["name"],
        "power": m.get("power"),
        "accuracy": m.get("accuracy"),
        "pp": m.get("pp"),
        "damage_class": m["damage_class"]["name"],
        "effect": english_text(m.get("effect_entries"), "short_effect"),
    }


async def fetch_pokemon_detail(client: httpx.AsyncClient, name: str) -> Dict[str, Any]:
    """Build the detail payload for one Pokémon.

    Resolves the species, its evolution chain and the first ``MOVE_LIMIT``
    moves. Any upstream or shaping failure is raised as ``PokemonNotFound``.
    """
    try:
        pokemon = await fetch_json(client, f"/pokemon/{quote(name, safe='')}")
        species = await fetch_json(client, pokemon["species"]["url"])
        evolution = await fetch_json(client, species["evolution_chain"]["url"])
        moves = await asyncio.gather(*(
            _fetch_move(client, m["move"]["url"]) for m in pokemon.get("moves", [])[:MOVE_LIMIT]
        ))
        artwork = ((pokemon.get("sprites") or {}).get("other") or {}).get("official-artwork") or {}
        cries = pokemon.get("cries") or {}
        return {
            "name": pokemon["name"],
            "id": pokemon["id"],
            "height": tenths(pokemon.get("height")),
            "weight": tenths(pokemon.get("weight")),
            "types": [t["type"]["name"] for t in pokemon.get("types", [])],
            "abilities": [a["ability"]["name"] for a in pokemon.get("abilities", [])],
            "stats": [{"name": s["stat"]["name"], "base": s["base_stat"]} for s in pokemon.get("stats", [])],
            "sprites": {"default": artwork.get("front_default")},
            "cries": {"latest": cries.get("latest"), "legacy": cries.get("legacy")},
            "flavor_text": english_text(species.get("flavor_text_entries"), "flavor_text"),
            "egg_groups": [g["name"] for g in species.get("egg_groups", [])],
            "gender_rate": species.get("gender_rate"),  # -1 = genderless
            "base_experience": pokemon.get("base_experience"),
            "evolutions": _extract_chain(evolution.get("chain")),
            "moves": list(moves),
        }
    except httpx.HTTPStatusError as e:
        raise PokemonNotFound(f"Failed fetching {e.request.url}") from e
    except httpx.HTTPError as e:
        raise PokemonNotFound(f"Upstream error for {name}: {e.__class__.__name__}") from e
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise PokemonNotFound(f"Malformed upstream payload for {name}") from e


async def fetch_pokemon_names(client: httpx.AsyncClient) -> List[str]:
    try:
        data = await fetch_json(client, "/pokemon", {"limit": SUGGESTION_LIMIT})
        return [p["name"] for p in data["results"]]
    except httpx.HTTPStatusError as e:
        raise UpstreamUnavailable(f"Failed fetching {e.request.url}") from e
    except httpx.HTTPError as e:
        raise UpstreamUnavailable(f"Failed to fetch pokemon list: {e.__class__.__name__}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamUnavailable("Malformed pokemon list payload") from e
