from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, Tuple, Union

from .colors import color_for_class_id
from .types import Label


PathLike = Union[str, Path]

# "  3: traffic light" inside the `names:` block, optionally quoted
_NAME_ENTRY = re.compile(r"""^\s+(\d+)\s*:\s*(['"]?)(.*?)\2\s*$""")


def _iter_name_entries(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    in_names = False
    for raw in lines:
        line = raw.rstrip("\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        if not line[:1].isspace():
            # Top-level key: only the block right after `names:` is read.
            if in_names:
                return
            in_names = line.strip() == "names:"
            continue
        if in_names:
            match = _NAME_ENTRY.match(line)
            if match:
                yield int(match.group(1)), match.group(3)


def load_labels(metadata_path: PathLike) -> Dict[int, Label]:
    """
    Labels keyed by class id, read from a model's `metadata.yaml`.

    Only the `names` mapping is used; each class gets its palette color:

        names:
          0: person
          1: bicycle

    No PyYAML dependency on purpose.
    """

    with open(metadata_path, "r", encoding="utf-8") as f:
        return {
            class_id: Label(name=name, color=color_for_class_id(class_id))
            for class_id, name in _iter_name_entries(f)
        }


def load_class_names(metadata_path: PathLike) -> Dict[int, str]:
    return {class_id: label.name for class_id, label in load_labels(metadata_path).items()}
