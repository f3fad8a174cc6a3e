"""Identity canonicalization for contributor names and emails.

Contributors commit under several names and addresses over time. The alias
table collapses those onto one canonical identity so their lines land in a
single aggregation bucket.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from gitreviewer.models import ContributorIdentity

logger = logging.getLogger(__name__)


def _email_token(email: str) -> str:
    """Emails compare case-insensitively."""
    return email.strip().lower()


@dataclass
class IdentityAliasTable:
    """Alias table shared by names and emails.

    Attributes:
        aliases: Raw token (name or email) -> canonical token of the same kind.
        names_by_email: Email -> canonical name, for entries that declare a
            proper name for an address.
    """

    aliases: dict[str, str] = field(default_factory=dict)
    names_by_email: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, aliases: Mapping[str, str]) -> "IdentityAliasTable":
        """Build a table from a flat token -> token mapping.

        Tokens containing ``@`` are treated as emails. An email mapped to a
        plain name declares that name for the email rather than aliasing it.
        """
        table = cls()
        for raw, canonical in aliases.items():
            if "@" in raw and "@" not in canonical:
                table.declare_name(raw, canonical)
            elif "@" in raw:
                table.add_email_alias(raw, canonical)
            else:
                table.add_name_alias(raw, canonical)
        return table

    def add_name_alias(self, raw_name: str, canonical_name: str) -> None:
        """Map a commit name onto a canonical name."""
        if raw_name and canonical_name:
            self.aliases[raw_name.strip()] = canonical_name.strip()

    def add_email_alias(self, raw_email: str, canonical_email: str) -> None:
        """Map a commit email onto a canonical email."""
        if raw_email and canonical_email:
            self.aliases[_email_token(raw_email)] = canonical_email.strip()

    def declare_name(self, email: str, name: str) -> None:
        """Declare the canonical name for every commit made with ``email``."""
        if email and name:
            self.names_by_email[_email_token(email)] = name.strip()

    def update(self, other: "IdentityAliasTable") -> None:
        """Layer ``other`` on top of this table; its keys win."""
        self.aliases.update(other.aliases)
        self.names_by_email.update(other.names_by_email)

    def resolve_name(self, raw_name: str) -> str | None:
        return self.aliases.get(raw_name.strip())

    def resolve_email(self, raw_email: str) -> str | None:
        return self.aliases.get(_email_token(raw_email))

    def declared_name(self, email: str) -> str | None:
        return self.names_by_email.get(_email_token(email))

    def __len__(self) -> int:
        return len(self.aliases) + len(self.names_by_email)

    def __bool__(self) -> bool:
        return bool(self.aliases or self.names_by_email)


def canonicalize(
    raw_name: str,
    raw_email: str,
    aliases: IdentityAliasTable | None = None,
) -> ContributorIdentity:
    """Resolve a raw (name, email) pair to its canonical identity.

    The email is resolved first. The name then comes from, in order: a name
    declared for the raw email, a name declared for the canonical email, a
    direct name alias, or the raw name itself. Looking at both emails means
    two addresses declared for one person end up with the same name.

    Never fails; unknown identities canonicalize to themselves.

    Args:
        raw_name: Name as recorded on the commit.
        raw_email: Email as recorded on the commit.
        aliases: Alias table. None behaves like an empty table.

    Returns:
        ContributorIdentity with the canonical name and email.
    """
    raw_name = raw_name.strip()
    raw_email = raw_email.strip()
    if not aliases:
        return ContributorIdentity(name=raw_name, email=raw_email)

    email = aliases.resolve_email(raw_email) or raw_email
    name = (
        aliases.declared_name(raw_email)
        or aliases.declared_name(email)
        or aliases.resolve_name(raw_name)
        or raw_name
    )
    return ContributorIdentity(name=name, email=email)


def contributor_key(
    raw_name: str,
    raw_email: str,
    aliases: IdentityAliasTable | None = None,
) -> str:
    """Aggregation key for a raw identity, see ContributorIdentity.key."""
    return canonicalize(raw_name, raw_email, aliases).key


__all__ = [
    "IdentityAliasTable",
    "canonicalize",
    "contributor_key",
]
