"""
Write-temp-then-rename publishing.

Each artifact is written to "<stem>-temp<suffix>" next to its final path
and then os.replace()d over it, so readers only ever see a complete old
file or a complete new one. If anything fails before the rename the temp
file is left behind; the next run truncates and reuses it.

Artifacts are independent: a failure on the second one does not roll back
the first.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterable, List, TextIO, Tuple, Union

Writer = Callable[[TextIO], None]
PathLike = Union[str, "os.PathLike[str]"]


def temp_path_for(path: Path) -> Path:
    # schedule.json -> schedule-temp.json
    return path.with_name(f"{path.stem}-temp{path.suffix}")


def text_writer(content: str) -> Writer:
    def write(f: TextIO) -> None:
        f.write(content)
    return write


def fsync_dir(path: PathLike) -> None:
    # persist the rename itself; directories can only be opened on posix
    if os.name != "posix":
        return
    fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write(path: PathLike, write: Writer) -> Path:
    final_path = Path(path)
    tmp_path = temp_path_for(final_path)

    # newline="" so CRLF in ICS content goes out untouched
    with open(tmp_path, "w", encoding="utf-8", newline="") as f:
        write(f)
        f.flush()
        os.fsync(f.fileno())

    os.replace(tmp_path, final_path)
    fsync_dir(final_path.parent)
    return final_path


def ensure_dir(path: PathLike) -> None:
    os.makedirs(path, exist_ok=True)


def publish(output_dir: PathLike, artifacts: Iterable[Tuple[str, Writer]]) -> List[Path]:
    ensure_dir(output_dir)
    committed: List[Path] = []
    for name, write in artifacts:
        committed.append(atomic_write(Path(output_dir) / name, write))
    return committed
