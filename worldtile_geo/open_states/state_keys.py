"""Region name to internal state-key lookup.

Open-state features come from GADM level-1 data whose properties carry
the region name under varying keys (``NAME_1``, ``name`` ...).  The
marketplace backend addresses regions by snake_case keys.
"""

from __future__ import annotations

STATE_NAME_TO_KEY: dict[str, str] = {
    "Karnataka": "karnataka",
    "Maharashtra": "maharashtra",
    "Delhi": "delhi",
    "Telangana": "telangana",
    "West Bengal": "west_bengal",
    "Rajasthan": "rajasthan",
    "Kerala": "kerala",
    "Tamil Nadu": "tamil_nadu",
}

# GADM property names first, then common hand-written ones.
NAME_PROPERTY_KEYS: tuple[str, ...] = (
    "NAME_1",
    "NAME_0",
    "name",
    "state",
    "stateName",
    "state_name",
)

_LOWER_NAME_TO_KEY = {name.lower(): key for name, key in STATE_NAME_TO_KEY.items()}


def get_state_key(state_name: str | None) -> str | None:
    """Return the key for *state_name*, matching exactly then case-insensitively."""
    if state_name is None:
        return None
    if state_name in STATE_NAME_TO_KEY:
        return STATE_NAME_TO_KEY[state_name]
    return _LOWER_NAME_TO_KEY.get(state_name.lower())


def extract_state_key_from_feature(properties: dict[str, object] | None) -> str | None:
    """Find the state key for a feature from its properties.

    Tries each of ``NAME_PROPERTY_KEYS`` in order, then a direct
    ``stateKey`` property.  Returns ``None`` when nothing matches.
    """
    if properties is None:
        return None

    for key in NAME_PROPERTY_KEYS:
        value = properties.get(key)
        if isinstance(value, str):
            state_key = get_state_key(value)
            if state_key is not None:
                return state_key

    direct = properties.get("stateKey")
    return direct if isinstance(direct, str) else None
