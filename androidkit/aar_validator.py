"""Validate the files found in an aar against the rule's attributes."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from androidkit.buildozer import BuildozerError


class Tristate(IntEnum):
    """A flag that may be true, false or unset."""

    FALSE = -1
    UNSET = 0
    TRUE = 1

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int):
            return cls.UNSET
        return None

    @property
    def is_set(self) -> bool:
        return self is not Tristate.UNSET

    @property
    def as_bool(self) -> bool:
        return self is Tristate.TRUE


@dataclass(frozen=True)
class AarFile:
    """A file extracted from an aar: where it is on disk and its path inside the aar."""

    path: str = ""
    rel_path: str = ""

    def __str__(self) -> str:
        return f"{self.path}:{self.rel_path}"


@dataclass(frozen=True)
class ToCopy:
    """A file to copy from src to dest."""

    src: str
    dest: str


@dataclass(frozen=True)
class ManifestValidator:
    """Requires exactly one manifest and copies it to dest."""

    dest: str = ""

    def validate(self, files: Iterable[AarFile]) -> list[ToCopy]:
        files = list(files)
        if not files:
            raise BuildozerError("No manifest was found")
        if len(files) > 1:
            raise BuildozerError("More than one manifest was found")
        return [ToCopy(src=files[0].path, dest=self.dest)]


@dataclass(frozen=True)
class ResourceValidator:
    """Copies resource files under dest, checking them against the rule attribute."""

    dest: str = ""
    rule_attr: str = ""
    has_res: Tristate = Tristate.UNSET

    def validate(self, files: Iterable[AarFile]) -> list[ToCopy]:
        to_copy = [
            ToCopy(src=f.path, dest=os.path.join(self.dest, f.rel_path)) for f in files
        ]
        seen = bool(to_copy)
        has_res = Tristate(self.has_res)
        if has_res.is_set and seen != has_res.as_bool:
            negation = "" if seen else "not "
            msg = (
                f"{self.rule_attr} attribute is {has_res.as_bool}, "
                f"but files were {negation}found"
            )
            raise BuildozerError(msg, rule_attr=self.rule_attr, new_value=str(seen))
        return to_copy