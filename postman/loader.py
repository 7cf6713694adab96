import json
from typing import List

from postman.errors import ParseError
from postman.graph import Intersection

OPTIONAL_FIELDS = ("address", "altitude", "latitude", "longitude")


def parse_intersection(raw: dict) -> Intersection:
    if not isinstance(raw, dict):
        raise ParseError(f"expected an intersection object, got {type(raw).__name__}", stage="load")
    try:
        name, node_id = raw["name"], raw["id"]
    except KeyError as exc:
        raise ParseError(f"intersection is missing field {exc.args[0]!r}", stage="load") from None

    neighbours = raw.get("neighbours") or {}
    if not isinstance(neighbours, dict):
        raise ParseError(f"neighbours of {name!r} must be an object", stage="load")
    if isinstance(node_id, bool) or not isinstance(node_id, int):
        raise ParseError(f"id {node_id!r} of {name!r} is not an integer", stage="load")
    if node_id < 0:
        raise ParseError(f"id of {name!r} is negative", stage="load")

    return Intersection(
        name=str(name),
        id=node_id,
        neighbours={str(k): str(v) for k, v in neighbours.items()},
        **{key: raw.get(key) for key in OPTIONAL_FIELDS},
    )


def load_intersections(path: str) -> List[Intersection]:
    """Read a JSON array of intersections from ``path``."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ParseError(f"{path} is not valid JSON: {exc}", stage="load") from None
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path} is not UTF-8 text: {exc}", stage="load") from None

    if not isinstance(data, list):
        raise ParseError(f"{path} must contain a JSON array of intersections", stage="load")
    return [parse_intersection(raw) for raw in data]
