from __future__ import annotations

from enum import Enum
from typing import Mapping, Tuple


class Role(str, Enum):
    """The two hosts; the value doubles as the transcript label."""

    MALE = "형제님"
    FEMALE = "자매님"

    @property
    def label(self) -> str:
        return self.value


ROLE_TOKENS: Mapping[Role, Tuple[str, ...]] = {
    Role.MALE: ("brother", "형제님", "오빠"),
    Role.FEMALE: ("sister", "자매님", "여동생"),
}


def classify_speaker(label: str, table: Mapping[Role, Tuple[str, ...]] = ROLE_TOKENS) -> Role:
    """Resolve a free-form speaker label to a role.

    Male tokens win; anything else, including an empty label, is the sister.
    """
    normalized = (label or "").lower()
    if any(token.lower() in normalized for token in table.get(Role.MALE, ())):
        return Role.MALE
    return Role.FEMALE
