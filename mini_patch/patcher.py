from __future__ import annotations

import copy
import logging
from typing import Any, Mapping, Optional, TypeVar

from .coerce import assign
from .errors import FieldNotWritable, PathNotResolved
from .locator import FieldHandle, locate
from .path import Path

T = TypeVar("T")

PatchSet = Mapping[str, Any]


class Patcher:
    """Apply dotted-path patch sets onto dataclass records in place.

    Entries are applied one by one. The first failing entry raises and the
    remaining entries are skipped; entries applied before it stay applied.
    With ``strict_paths`` a path that still has segments left once it reaches
    a leaf field fails instead of the extra segments being ignored.
    """

    def __init__(
        self,
        *,
        strict_paths: bool = False,
        logger: Optional[logging.Logger | logging.LoggerAdapter] = None,
    ) -> None:
        self.strict_paths = strict_paths
        self.logger = logger or logging.getLogger(__name__)

    def patch_it(self, target: Any, patch: PatchSet) -> None:
        for path, value in patch.items():
            handle = self.locate_field(target, path)
            assign(handle, value, str(path))
            self.logger.debug('patch %s: apply "%s" -> %s', path, value, handle.path)

    def patched_copy(self, target: T, patch: PatchSet) -> T:
        """Patch a deep copy of ``target`` and return it.

        ``target`` itself is never modified, so a failure leaves nothing half
        applied.
        """
        clone = copy.deepcopy(target)
        self.patch_it(clone, patch)
        return clone

    def locate_field(self, target: Any, path: str) -> FieldHandle:
        tokens = Path(path).tokenize()
        handle = locate(target, tokens)
        if handle is None:
            raise PathNotResolved(path, f"path does not resolve: {path}")
        if handle.excess:
            if self.strict_paths:
                raise PathNotResolved(
                    path,
                    f"path continues past field {handle.name}: {'.'.join(handle.excess)}",
                )
            self.logger.debug(
                "patch %s: ignored segments %s past field %s",
                path,
                ".".join(handle.excess),
                handle.name,
            )
        if not handle.writable:
            raise FieldNotWritable(path, f"field {handle.name} is not writable")
        return handle


def patch_it(target: Any, patch: PatchSet, *, strict_paths: bool = False) -> None:
    Patcher(strict_paths=strict_paths).patch_it(target, patch)
