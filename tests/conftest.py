from __future__ import annotations

import sys
from pathlib import Path


def _put_package_root_first() -> None:
    # Lets `import yolo_canvas` resolve to this checkout when the package is not
    # installed (rootdir-less pytest invocations, plain `python -m unittest`).
    root = str(Path(__file__).resolve().parents[1])
    if root not in sys.path:
        sys.path.insert(0, root)


_put_package_root_first()
