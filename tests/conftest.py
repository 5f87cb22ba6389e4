"""Shared fixtures: a fake PokéAPI served through httpx.MockTransport."""

import httpx
import pytest

BASE_URL = "https://pokeapi.co/api/v2"


def _named(name, url=""):
    return {"name": name, "url": url}


def _move(name, move_type="electric", power=40):
    return {
        "name": name,
        "power": power,
        "accuracy": 100,
        "pp": 30,
        "type": _named(move_type),
        "damage_class": _named("special"),
        "effect_entries": [
            {"short_effect": "Efecto.", "language": _named("es")},
            {"short_effect": f"{name} effect.", "language": _named("en")},
        ],
    }


PIKACHU = {
    "id": 25,
    "name": "pikachu",
    "height": 4,
    "weight": 60,
    "base_experience": 112,
    "types": [{"type": _named("electric")}],
    "abilities": [{"ability": _named("static")}, {"ability": _named("lightning-rod")}],
    "stats": [{"base_stat": 35, "stat": _named("hp")}, {"base_stat": 90, "stat": _named("speed")}],
    "moves": [
        {"move": _named(f"move-{i}", f"{BASE_URL}/move/{i}/")} for i in range(1, 26)
    ],
    "species": _named("pikachu", f"{BASE_URL}/pokemon-species/25/"),
    "sprites": {"other": {"official-artwork": {"front_default": "https://img.example/25.png"}}},
    "cries": {"latest": "https://cries.example/25.ogg", "legacy": None},
}

PIKACHU_SPECIES = {
    "flavor_text_entries": [
        {"flavor_text": "Cuando se enfada...", "language": _named("es")},
        {"flavor_text": "When several of these POKéMON gather...", "language": _named("en")},
    ],
    "egg_groups": [_named("ground"), _named("fairy")],
    "gender_rate": 4,
    "evolution_chain": {"url": f"{BASE_URL}/evolution-chain/10/"},
}

PIKACHU_CHAIN = {
    "chain": {
        "species": _named("pichu"),
        "evolves_to": [
            {
                "species": _named("pikachu"),
                "evolves_to": [{"species": _named("raichu"), "evolves_to": []}],
            }
        ],
    }
}

NAMES = ["bulbasaur", "ivysaur", "pichu", "pikachu", "raichu", "mewtwo"]


class FakePokeAPI:
    def __init__(self):
        self.calls = []
        self.raw_paths = []
        self.fail_list = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)
        self.raw_paths.append(request.url.raw_path)
        if path == "/api/v2/pokemon":
            if self.fail_list:
                return httpx.Response(503, json={"detail": "down"})
            limit = int(request.url.params.get("limit", "20"))
            return httpx.Response(200, json={
                "count": len(NAMES), "next": None, "previous": None,
                "results": [_named(n, f"{BASE_URL}/pokemon/{n}/") for n in NAMES[:limit]],
            })
        if path == "/api/v2/pokemon/pikachu":
            return httpx.Response(200, json=PIKACHU)
        if path == "/api/v2/pokemon-species/25/":
            return httpx.Response(200, json=PIKACHU_SPECIES)
        if path == "/api/v2/evolution-chain/10/":
            return httpx.Response(200, json=PIKACHU_CHAIN)
        if path.startswith("/api/v2/move/"):
            i = path.rstrip("/").rsplit("/", 1)[-1]
            return httpx.Response(200, json=_move(f"move-{i}"))
        return httpx.Response(404, text="Not Found")

    def count(self, path: str) -> int:
        return self.calls.count(path)


@pytest.fixture
def upstream():
    return FakePokeAPI()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(upstream))
