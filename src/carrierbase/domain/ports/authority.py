"""Port for external regulatory authority lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from carrierbase.domain.model import AuthoritySnapshot


@runtime_checkable
class AuthoritySource(Protocol):
    """Look up a carrier's registration, safety and insurance record.

    Returns ``None`` when the source has no record for the number. Raises
    ``AuthorityLookupError`` when no answer could be obtained at all.
    """

    def lookup(
        self,
        *,
        mc_number: str | None = None,
        dot_number: str | None = None,
    ) -> AuthoritySnapshot | None: ...
