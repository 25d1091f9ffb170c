# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Layer merging and typed deserialization.

Merge Behavior:
    Layers are merged file first, environment second, whatever order they
    arrive in. The merge is deep with "overlay wins" semantics:

    - **Dicts**: Recursively merged (keys from overlay override base)
    - **Lists**: Completely replaced (NOT appended/extended)
    - **Scalars**: Overwritten (strings, numbers, booleans)

    Overriding ``db.host`` from the environment therefore leaves a
    file-defined ``db.port`` untouched.

Deserialization:
    The merged tree is decoded into the target type with a pydantic
    TypeAdapter, so any type pydantic understands works as a target
    (BaseModel subclasses, dataclasses, TypedDicts, plain dicts). Failures
    are raised as ConfigLoadError with pydantic's diagnostic text. A string
    field that received a coerced environment value (``"12345"`` read as
    12345) is decoded from the original string instead.

Example:
    ```python
    from pydantic import BaseModel
    from dumbo_config.merge import resolve

    class Settings(BaseModel):
        name: str
        value: int

    settings = resolve(layers, Settings)
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
import copy
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from dumbo_config.exceptions import ConfigLoadError
from dumbo_config.logging import Logger, get_global_logger, log_yaml_content
from dumbo_config.sources import ConfigLayer, LayerKind

T = TypeVar("T")


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merges two dicts with "overlay wins" semantics.

    Merge behavior:

    - dict + dict -> deep merge
    - list + list -> overlay REPLACES base (not concatenated)
    - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.

    Args:
        base: The base dictionary.
        overlay: The overlay dictionary that takes precedence.

    Returns:
        A new dictionary with the merged contents.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = deep_merge(result[k], v)
        else:
            # Replace lists and scalars entirely
            result[k] = v
    return result


def merge_layers(
    layers: Sequence[ConfigLayer], logger: Logger | None = None
) -> dict[str, Any]:
    """Merges layers into one key tree, environment layers winning.

    Args:
        layers: Layers in any order.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        The merged key tree.
    """
    if logger is None:
        logger = get_global_logger()

    merged: dict[str, Any] = {}
    # sorted() is stable, so layers of the same kind keep their order
    for layer in sorted(layers, key=lambda layer: layer.kind):
        logger.verbose("MERGE", f"Applying {layer.kind.name.lower()} layer: {layer.name}")
        merged = deep_merge(merged, layer.data)

    logger.verbose("MERGE", f"Deep merged {len(layers)} layer(s)")
    logger.debug("MERGE", "--- Final Merged Configuration ---")
    log_yaml_content(logger, "MERGE", merged)
    return merged


def deserialize(
    tree: dict[str, Any],
    target_type: type[T],
    raw: dict[str, Any] | None = None,
) -> T:
    """Decodes a merged key tree into ``target_type``.

    Environment values are coerced to bool/int/float before merging, and
    pydantic does not turn those back into strings. When ``raw`` holds the
    uncoerced environment strings, every string field rejected for such a
    value gets its original string back and the tree is decoded once more.

    Args:
        tree: The merged key tree.
        target_type: Type to decode the tree into.
        raw: Uncoerced environment strings, shaped like the env layers.

    Raises:
        ConfigLoadError: On missing fields, type mismatches, or fields the
            target forbids. The message keeps pydantic's diagnostic text.
    """
    adapter = TypeAdapter(target_type)
    try:
        return adapter.validate_python(tree)
    except ValidationError as err:
        restored = _restore_raw_strings(tree, err, raw or {})
        if restored is None:
            raise ConfigLoadError(str(err), err) from err

    try:
        return adapter.validate_python(restored)
    except ValidationError as err:
        raise ConfigLoadError(str(err), err) from err


def _lookup(tree: Any, loc: tuple[int | str, ...]) -> Any:
    cur = tree
    for segment in loc:
        if not isinstance(cur, dict) or segment not in cur:
            return None
        cur = cur[segment]
    return cur


def _restore_raw_strings(
    tree: dict[str, Any], err: ValidationError, raw: dict[str, Any]
) -> dict[str, Any] | None:
    """Returns a copy of ``tree`` with raw env strings put back, or None."""
    restored: dict[str, Any] | None = None
    for error in err.errors():
        if error["type"] != "string_type":
            continue
        loc = error["loc"]
        original = _lookup(raw, loc)
        if not loc or not isinstance(original, str):
            continue
        if restored is None:
            restored = copy.deepcopy(tree)
        parent = _lookup(restored, loc[:-1])
        if isinstance(parent, dict) and loc[-1] in parent:
            parent[loc[-1]] = original
    return restored


def resolve(
    layers: Sequence[ConfigLayer],
    target_type: type[T],
    logger: Logger | None = None,
) -> T:
    """Merges ``layers`` and decodes the result into ``target_type``.

    Either a fully populated ``target_type`` instance is returned or an
    error is raised. No fallback values are synthesized here.

    Args:
        layers: Layers to merge, in any order.
        target_type: Type to decode the merged tree into.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        The decoded configuration object.

    Raises:
        ConfigLoadError: If the merged tree does not fit ``target_type``.
    """
    raw: dict[str, Any] = {}
    for layer in layers:
        if layer.kind is LayerKind.ENV:
            raw = deep_merge(raw, layer.raw)
    return deserialize(merge_layers(layers, logger), target_type, raw)
