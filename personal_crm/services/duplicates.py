"""Find existing contacts that look like the one about to be created."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from personal_crm.models import Contact
from personal_crm.schemas import DuplicateCandidate


async def find_duplicates(session: AsyncSession, candidate: DuplicateCandidate) -> list[Contact]:
    """Return contacts sharing the candidate's email or full name.

    Email matches are exact and case sensitive and come first. Name matches
    compare first and last name case-insensitively, a missing last name
    counting as an empty one.
    """

    matches: list[Contact] = []
    seen: set[int] = set()

    if candidate.email:
        result = await session.execute(
            select(Contact)
            .where(Contact.email == candidate.email)
            .order_by(Contact.id)
            .execution_options(populate_existing=True)
        )
        for contact in result.scalars():
            matches.append(contact)
            seen.add(contact.id)

    result = await session.execute(
        select(Contact)
        .where(
            func.lower(Contact.first_name) == func.lower(candidate.first_name),
            func.lower(func.coalesce(Contact.last_name, ""))
            == func.lower(candidate.last_name or ""),
        )
        .order_by(Contact.id)
        .execution_options(populate_existing=True)
    )
    for contact in result.scalars():
        if contact.id not in seen:
            matches.append(contact)
            seen.add(contact.id)

    return matches
