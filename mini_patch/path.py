from __future__ import annotations

from typing import List


DELIMITER = "."


def upper_first(segment: str) -> str:
    if segment == "":
        return ""
    head = segment[0].upper()
    # Keep code points whose upper case is not a single code point (e.g. "ß").
    if len(head) != 1:
        head = segment[0]
    return head + segment[1:]


class Path(str):
    """Dotted field address such as ``address.city``.

    Any string is accepted; a path that names nothing only fails when it is
    applied.
    """

    def tokenize(self) -> List[str]:
        return [upper_first(tok) for tok in self.split(DELIMITER)]
