"""Expansion options and their YAML configuration file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpandOptions:
    """Controls the shape of generated code.

    Attributes:
        indent: Spaces per indentation level in block output.
        inline: Emit the whole expansion on one line.
        qualified_clone: Emit ``::core::clone::Clone::clone(&x)`` instead of
            ``x.clone()``, so a local `Clone` shadowing cannot interfere.
    """

    indent: int = 2
    inline: bool = False
    qualified_clone: bool = False

    def __post_init__(self) -> None:
        if self.indent < 0:
            msg = f"indent must be non-negative, got {self.indent}"
            raise ValueError(msg)


def load_options(config_path: Path | str) -> ExpandOptions:
    """Load expansion options from YAML.

    Unknown keys are ignored with a warning; an empty file yields defaults.

    Args:
        config_path: Path to the YAML file.

    Returns:
        ExpandOptions configuration.

    Raises:
        ValueError: If the document is not a mapping or a value has the
            wrong type.
    """
    with Path(config_path).open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"{config_path}: invalid YAML: {e}"
            raise ValueError(msg) from e

    if data is None:
        return ExpandOptions()
    if not isinstance(data, dict):
        msg = f"{config_path}: expected a mapping at top level"
        raise ValueError(msg)

    known = {f.name: f for f in fields(ExpandOptions)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("%s: ignoring unknown option %r", config_path, key)
            continue
        expected = int if known[key].type == "int" else bool
        # bool is a subclass of int; reject `indent: true`
        if not isinstance(value, expected) or (
            expected is int and isinstance(value, bool)
        ):
            msg = f"{config_path}: option {key!r} must be {expected.__name__}"
            raise ValueError(msg)
        values[key] = value

    logger.debug("Loaded options from %s: %s", config_path, values)
    return ExpandOptions(**values)
