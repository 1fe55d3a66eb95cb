"""Linear fact history with a live/browsing cursor."""

from ..facts.models import Fact

LIVE = -1


class FactHistory:
    """Facts the user has moved past, oldest first.

    ``cursor`` is ``LIVE`` (-1) while the live fact is shown; the live fact
    is never stored here until it is superseded. A non-negative cursor means
    ``facts[cursor]`` is on screen.
    """

    def __init__(self) -> None:
        self._facts: list[Fact] = []
        self.cursor = LIVE

    @property
    def facts(self) -> tuple[Fact, ...]:
        return tuple(self._facts)

    @property
    def is_browsing(self) -> bool:
        return self.cursor != LIVE

    def __len__(self) -> int:
        return len(self._facts)

    def __getitem__(self, index: int) -> Fact:
        return self._facts[index]

    def push(self, fact: Fact) -> None:
        """Append a superseded live fact."""
        self._facts.append(fact)

    def current(self) -> Fact | None:
        """The fact under the cursor, or None while live."""
        if self.cursor == LIVE:
            return None
        return self._facts[self.cursor]

    def replace_current(self, fact: Fact) -> None:
        """Substitute the entry under the cursor; no-op while live."""
        if 0 <= self.cursor < len(self._facts):
            self._facts[self.cursor] = fact

    def can_retreat(self) -> bool:
        return bool(self._facts) and (self.cursor > 0 or self.cursor == LIVE)

    def retreat(self, live_fact: Fact | None) -> Fact | None:
        """Move the cursor one step back.

        Leaving the live position pushes ``live_fact`` first, so the first
        step lands on it. Returns the fact now under the cursor, or None if
        the cursor did not move.
        """
        if not self._facts:
            return None

        if self.cursor == LIVE:
            if live_fact is not None:
                self._facts.append(live_fact)
            self.cursor = len(self._facts) - 1
        elif self.cursor > 0:
            self.cursor -= 1
        else:
            return None

        return self._facts[self.cursor]

    def return_to_live(self) -> None:
        self.cursor = LIVE

    def clear(self) -> None:
        self._facts.clear()
        self.cursor = LIVE

    def describe(self, live_fact: Fact | None, width: int = 50) -> str:
        """Multi-line dump of the cursor state for debugging."""
        lines = [
            f"Current fact: {live_fact.text[:width] if live_fact else 'None'}",
            f"History count: {len(self._facts)}",
            f"Current history index: {self.cursor}",
            f"Can go back: {self.can_retreat()}",
            "History facts:",
        ]
        for index, fact in enumerate(self._facts):
            marker = " -> " if index == self.cursor else "    "
            lines.append(f"{marker}{index}: {fact.text[:width]}")
        if self.cursor == LIVE:
            lines.append(" -> Current fact (not in history)")
        return "\n".join(lines)
