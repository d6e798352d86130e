"""Character metadata documents, in the shape marketplaces index."""

from __future__ import annotations

from typing import Any


def character_name(classe: str, nivel: int) -> str:
    return f"{classe} de Nivel {nivel}"


def build_character_metadata(
    classe: str,
    nivel: int,
    poder: int,
    image_locator: str = "",
) -> dict[str, Any]:
    """Build the JSON document a character's ``uri`` points at.

    Examples
    --------
    >>> doc = build_character_metadata("Mago", 1, 100, "sha256:abc")
    >>> doc["name"]
    'Mago de Nivel 1'
    >>> [a["trait_type"] for a in doc["attributes"]]
    ['Classe', 'Nivel', 'Poder']
    """
    return {
        "name": character_name(classe, nivel),
        "description": f"Um {classe} de nivel {nivel} e {poder} de poder.",
        "image": image_locator,
        "attributes": [
            {"trait_type": "Classe", "value": classe},
            {"trait_type": "Nivel", "value": nivel},
            {"trait_type": "Poder", "value": poder},
        ],
    }
