"""Gap-filling merge of default values into a loaded document.

Unlike an override merge, defaults never replace a value the document
already has; they only add what is missing.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from copy import deepcopy
from typing import Any


def fill_defaults(defaults: Mapping[str, Any], target: MutableMapping[str, Any]) -> int:
    """Fill missing keys of target from defaults, in place.

    Rules:
    - Dict defaults: target[key] is made a dict (replacing a missing or
      non-dict value) and filled recursively
    - Other defaults: only set when target has no such key
    - Existing non-dict values are never overwritten (None counts as a value)

    Args:
        defaults: The reference mapping.
        target: The mapping to fill; mutated in place.

    Returns:
        Number of leaf values inserted. Dicts created to hold them are not counted.
    """
    changed = 0

    for key, default_value in defaults.items():
        if isinstance(default_value, Mapping):
            current = target.get(key)
            if not isinstance(current, MutableMapping):
                current = {}
                target[key] = current
            changed += fill_defaults(default_value, current)
        elif key not in target:
            target[key] = deepcopy(default_value)
            changed += 1

    return changed
