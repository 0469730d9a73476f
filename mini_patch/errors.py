from __future__ import annotations


class PatchError(ValueError):
    """Failure to apply one patch entry.

    ``path`` is the entry's path exactly as the caller gave it.
    """

    def __init__(self, path: str, cause: str) -> None:
        super().__init__(f"{cause} (path: {path!r})")
        self.path = str(path)
        self.cause = cause


class PathNotResolved(PatchError):
    pass


class FieldNotWritable(PatchError):
    pass


class TypeMismatch(PatchError):
    pass


class NumericConversionFailure(PatchError):
    pass


class UnsupportedFieldKind(NumericConversionFailure):
    pass
