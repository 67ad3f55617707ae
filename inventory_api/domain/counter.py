from __future__ import annotations


class Counter:
    """Sequential placeholder numbers for one statement: 1, 2, 3, ...

    Create one per statement-building call and drop it afterwards.
    """

    def __init__(self) -> None:
        self._i = 0

    def next(self) -> int:
        self._i += 1
        return self._i

    def next_placeholder(self) -> str:
        return f"${self.next()}"
