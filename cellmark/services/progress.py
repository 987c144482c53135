from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Busy indicator with tqdm (TTY only).

Opening and saving a workbook run through a few stages (read, decode,
encode, write). The indicator shows them as a single tqdm bar; in non-TTY
environments (CI, pipes) it is disabled to avoid ANSI control sequence spam.
"""

__all__ = [
    "BusyIndicator",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class BusyIndicator:
    """Stage progress for one long-running import or export."""

    def __init__(self, total_stages: int, *, description: str = "Working") -> None:
        self.total_stages = total_stages
        self.description = description
        self.current_stage = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_stages,
                desc=description,
                unit="step",
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_stage(self, name: str) -> None:
        self.current_stage += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({name})")

    def finish_stage(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> BusyIndicator:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
