"""
Atomic replacement of generated files.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path


class AtomicWriter:
    """Writes a file through a temporary sibling and a rename.

    Readers of the target see the old content or the complete new
    content, never a partial file. An optional validator runs on the
    content before the rename; if it raises, the target is untouched.
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        self.validate = validate

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        # The temporary file lives beside the target so the rename stays on one filesystem
        fd, name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(name)
        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(content)
            if validate and self.validate is not None:
                self.validate(content)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
