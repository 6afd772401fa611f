"""
Scryfall card ingestion.

Turns Scryfall card objects into Card records for the catalog, and
fetches them from the Scryfall API or a downloaded bulk file.

Scryfall API: https://scryfall.com/docs/api
"""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import httpx

from deckforge.models.card import Card, LegalityStatus

SCRYFALL_API = "https://api.scryfall.com"
SCRYFALL_BULK_API = f"{SCRYFALL_API}/bulk-data"
USER_AGENT = "DeckForge/1.0"

SUPERTYPES = frozenset({"Basic", "Legendary", "Snow", "World", "Ongoing", "Elite", "Host"})

TYPE_SEPARATOR = "—"
FACE_SEPARATOR = " // "


def split_type_line(type_line: str) -> tuple[frozenset[str], frozenset[str], frozenset[str]]:
    """
    Split a type line into supertypes, types and subtypes.

    Only the front face of a multi-faced card is used:
    "Legendary Creature — Elf Warrior" -> ({Legendary}, {Creature}, {Elf, Warrior})
    """
    front = type_line.split(FACE_SEPARATOR)[0]
    left, _, right = front.partition(TYPE_SEPARATOR)
    words = left.split()
    supertypes = frozenset(word for word in words if word in SUPERTYPES)
    types = frozenset(word for word in words if word not in SUPERTYPES)
    subtypes = frozenset(right.split())
    return supertypes, types, subtypes


def _oracle_text(data: dict[str, Any]) -> str:
    if data.get("oracle_text") is not None:
        return str(data["oracle_text"])
    faces = data.get("card_faces") or []
    return "\n".join(face.get("oracle_text", "") for face in faces if face.get("oracle_text"))


def _front_face_value(data: dict[str, Any], field: str) -> Any:
    if data.get(field) is not None:
        return data[field]
    faces = data.get("card_faces") or []
    return faces[0].get(field) if faces else None


def parse_card(data: dict[str, Any]) -> Card:
    """
    Build a Card from one Scryfall card object.

    Raises:
        KeyError: If the object has no id or name
    """
    supertypes, types, subtypes = split_type_line(
        data.get("type_line") or _front_face_value(data, "type_line") or ""
    )
    colors = data.get("colors")
    if colors is None:
        colors = _front_face_value(data, "colors") or []

    legalities = {
        format_name: LegalityStatus.parse(status)
        for format_name, status in (data.get("legalities") or {}).items()
    }

    return Card(
        id=str(data["id"]),
        name=str(data["name"]),
        mana_cost=_front_face_value(data, "mana_cost") or "",
        cmc=float(data.get("cmc") or 0.0),
        colors=frozenset(colors),
        color_identity=frozenset(data.get("color_identity") or []),
        supertypes=supertypes,
        types=types,
        subtypes=subtypes,
        keywords=frozenset(data.get("keywords") or []),
        oracle_text=_oracle_text(data),
        power=_front_face_value(data, "power"),
        toughness=_front_face_value(data, "toughness"),
        legalities=legalities,
    )


def iter_bulk_cards(bulk_data_path: Path) -> Iterator[Card]:
    """
    Parse every card in a downloaded Scryfall bulk JSON file.

    Tokens, art cards and other non-playable objects are skipped.
    """
    with open(bulk_data_path, encoding="utf-8") as f:
        cards = json.load(f)

    for data in cards:
        if data.get("layout") in {"token", "double_faced_token", "art_series", "emblem"}:
            continue
        yield parse_card(data)


def get_bulk_data_url(client: httpx.Client | None = None) -> str:
    """
    Fetch the download URL for Scryfall's oracle-cards bulk data.

    Raises:
        httpx.HTTPError: If the API request fails
        ValueError: If Scryfall lists no oracle_cards entry
    """
    http = client or httpx.Client(headers={"User-Agent": USER_AGENT})
    try:
        response = http.get(SCRYFALL_BULK_API)
        response.raise_for_status()
    finally:
        if client is None:
            http.close()

    for entry in response.json()["data"]:
        if entry["type"] == "oracle_cards":
            return str(entry["download_uri"])

    raise ValueError("Could not find oracle_cards bulk data URL")


def download_bulk_data(output_path: Path) -> None:
    """Stream the oracle-cards bulk file to disk."""
    url = get_bulk_data_url()
    with httpx.stream(
        "GET",
        url,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    ) as response:
        response.raise_for_status()
        with open(output_path, "wb") as f:
            for chunk in response.iter_bytes(chunk_size=8192):
                f.write(chunk)


async def fetch_card(client: httpx.AsyncClient, card_id: str) -> Card | None:
    """
    Fetch one card by Scryfall id.

    Returns None when Scryfall has no such card.
    """
    response = await client.get(
        f"{SCRYFALL_API}/cards/{card_id}", headers={"User-Agent": USER_AGENT}
    )
    if response.status_code == 404:
        return None
    response.raise_for_status()
    return parse_card(response.json())
