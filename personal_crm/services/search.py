"""Staged contact search.

Each stage only runs when the previous one found nothing:

1. every whitespace separated term matches first or last name,
2. ``Last, First`` form,
3. the whole query as a substring of any searchable column,
4. a fuzzy scan of every contact ranked by edit distance.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from personal_crm.models import Company, Contact
from personal_crm.services.levenshtein import distance

logger = logging.getLogger(__name__)

FUZZY_MIN_THRESHOLD = 2
FUZZY_LENGTH_DIVISOR = 3
# When false, a missing last name or nickname scores as "" so any term of up to
# FUZZY_MIN_THRESHOLD characters matches every contact lacking one.
FUZZY_SKIP_EMPTY_NAMES = True


def fuzzy_threshold(term: str) -> int:
    """Maximum edit distance at which ``term`` still counts as a match."""

    return max(FUZZY_MIN_THRESHOLD, len(term) // FUZZY_LENGTH_DIVISOR)


async def search_contacts(session: AsyncSession, query: str, limit: int) -> list[Contact]:
    text = (query or "").strip()
    if not text:
        return []

    terms = text.split()
    if len(terms) >= 2:
        contacts = await _fetch(session, _all_terms_statement(terms), limit)
        if contacts:
            return contacts

    if "," in text:
        last_part, first_part = (part.strip() for part in text.split(",", 1))
        stmt = _ordered(
            select(Contact).where(
                Contact.last_name.icontains(last_part, autoescape=True),
                Contact.first_name.icontains(first_part, autoescape=True),
            )
        )
        contacts = await _fetch(session, stmt, limit)
        if contacts:
            return contacts

    stmt = _ordered(
        select(Contact).where(
            or_(
                *(
                    column.icontains(text, autoescape=True)
                    for column in (
                        Contact.first_name,
                        Contact.last_name,
                        Contact.nickname,
                        Contact.email,
                        Contact.phone,
                        Contact.tags,
                    )
                )
            )
        )
    )
    contacts = await _fetch(session, stmt, limit)
    if contacts:
        return contacts

    return await _fuzzy_search(session, [term.lower() for term in terms], limit)


async def search_companies(session: AsyncSession, query: str, limit: int) -> list[Company]:
    text = (query or "").strip()
    if not text:
        return []
    stmt = (
        select(Company)
        .where(
            or_(
                Company.name.icontains(text, autoescape=True),
                Company.industry.icontains(text, autoescape=True),
                Company.website.icontains(text, autoescape=True),
            )
        )
        .order_by(Company.name, Company.id)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


def score_contact(
    contact: Contact, terms: Sequence[str], skip_empty: bool = FUZZY_SKIP_EMPTY_NAMES
) -> int | None:
    """Return the summed best distance for ``terms`` or ``None`` when rejected.

    Terms are compared with the lowercased first name, last name, nickname and
    each word of the first name. Empty names are left out unless ``skip_empty``
    is false, in which case they take part as ``""``.
    """

    candidates = _name_candidates(contact, skip_empty)
    if not candidates:
        return None

    total = 0
    for term in terms:
        best = min(distance(term, candidate) for candidate in candidates)
        if best > fuzzy_threshold(term):
            return None
        total += best
    return total


def _name_candidates(contact: Contact, skip_empty: bool) -> list[str]:
    candidates: list[str] = []
    for value in (contact.first_name, contact.last_name, contact.nickname):
        if value:
            candidates.append(value.lower())
        elif not skip_empty:
            candidates.append("")
    if contact.first_name:
        candidates.extend(word.lower() for word in contact.first_name.split())
    return candidates


async def _fuzzy_search(session: AsyncSession, terms: list[str], limit: int) -> list[Contact]:
    result = await session.execute(_ordered(select(Contact)))
    scored: list[tuple[int, Contact]] = []
    for contact in result.scalars():
        score = score_contact(contact, terms)
        if score is not None:
            scored.append((score, contact))

    scored.sort(key=lambda item: item[0])
    logger.debug("Fuzzy contact search", extra={"terms": terms, "matches": len(scored)})
    return [contact for _, contact in scored[:limit]]


def _all_terms_statement(terms: Sequence[str]) -> Select[tuple[Contact]]:
    clauses = [
        or_(
            Contact.first_name.icontains(term, autoescape=True),
            Contact.last_name.icontains(term, autoescape=True),
        )
        for term in terms
    ]
    return _ordered(select(Contact).where(and_(*clauses)))


def _ordered(stmt: Select[tuple[Contact]]) -> Select[tuple[Contact]]:
    return stmt.order_by(Contact.first_name, Contact.last_name, Contact.id).execution_options(
        populate_existing=True
    )


async def _fetch(session: AsyncSession, stmt: Select[tuple[Contact]], limit: int) -> list[Contact]:
    result = await session.execute(stmt.limit(limit))
    return list(result.scalars().all())
