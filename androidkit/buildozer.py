"""Rule configuration errors that a buildozer command can fix."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class BuildozerError(Exception):
    """A rule configuration error, optionally fixable by setting rule_attr to new_value."""

    msg: str
    rule_attr: str = ""
    new_value: str = ""

    __hash__ = Exception.__hash__

    def __str__(self) -> str:
        return self.msg


def merge_buildozer_errors(label: str, errors: Iterable[BuildozerError]) -> str:
    """Combine errors into one message, ending with a buildozer command when one applies."""
    lines = [f"error(s) found while processing aar '{label}':\n"]
    fixes = []
    for error in errors:
        lines.append(f"\t- {error.msg}\n")
        if error.new_value:
            fixes.append(f"'set {error.rule_attr} {error.new_value}' ")
    if fixes:
        lines.append("Use the following command to fix the target:\nbuildozer ")
        lines.extend(fixes)
        lines.append(label)
    return "".join(lines)