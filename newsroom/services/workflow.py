# newsroom/services/workflow.py
"""
Article publication workflow.

States:
    DRAFT <-> PENDING -> PUBLISHED
                      -> REJECTED (optionally with a rejection reason)

There is no transition table: which status may be set is decided by the
actor's role and whether they own the article. ``can_transition`` is the one
place that rule lives; every endpoint that changes status goes through
``transition``.

Usage:
    article = transition(session, article_id, actor, ArticleStatus.PENDING)
"""
import logging
from typing import Dict, Iterable, Optional, Set, Tuple

from sqlmodel import Session

from newsroom.db.models import Article, ArticleStatus, Role, User, utcnow
from newsroom.utils.errors import AuthorizationDenied, NotFound

logger = logging.getLogger(__name__)

EDITOR_TARGETS: Set[ArticleStatus] = {ArticleStatus.DRAFT, ArticleStatus.PENDING}
NOTIFY_ON: Set[ArticleStatus] = {ArticleStatus.PUBLISHED, ArticleStatus.REJECTED}


def can_transition(
    actor_role: Role,
    is_owner: bool,
    from_status: Optional[ArticleStatus],
    to_status: ArticleStatus,
) -> bool:
    """
    Authorization policy for status changes.

    - ADMIN may set any status on any article.
    - EDITOR may move their own articles between DRAFT and PENDING only.
    - USER may not change status.

    `from_status` is accepted so callers pass the full transition; no rule
    depends on it yet.
    """
    if actor_role == Role.ADMIN:
        return True
    if actor_role == Role.EDITOR:
        return is_owner and to_status in EDITOR_TARGETS
    return False


def can_edit(actor_role: Role, is_owner: bool) -> bool:
    """Content edits: admins on any article, editors on their own."""
    return actor_role == Role.ADMIN or (actor_role == Role.EDITOR and is_owner)


def allowed_targets(actor_role: Role) -> Set[ArticleStatus]:
    """Statuses `actor_role` may set on an article it owns."""
    return {status for status in ArticleStatus if can_transition(actor_role, True, None, status)}


def notify_author(article: Article) -> None:
    """Hook for author notifications on PUBLISHED/REJECTED. Only logs for now."""
    logger.info(
        "Article %s is now %s; notifying author %s",
        article.id, article.status.value, article.author_id,
    )


def transition(
    session: Session,
    article_id: int,
    actor: User,
    to_status: ArticleStatus,
    rejection_reason: Optional[str] = None,
    require_ownership: bool = False,
) -> Article:
    """
    Move an article to `to_status` on behalf of `actor`.

    Raises AuthorizationDenied when the role may never set `to_status`
    (checked before any lookup), and NotFound when the article is missing or,
    for anyone who must own it, authored by someone else.
    """
    if to_status not in allowed_targets(actor.role):
        if actor.role == Role.EDITOR:
            raise AuthorizationDenied("Editors can only set articles to DRAFT or PENDING status")
        raise AuthorizationDenied(f"Role {actor.role.value} cannot change article status")

    article = session.get(Article, article_id)
    must_own = require_ownership or actor.role != Role.ADMIN
    if not article or (must_own and article.author_id != actor.id):
        raise NotFound("Article not found or unauthorized")

    is_owner = article.author_id == actor.id
    if not can_transition(actor.role, is_owner, article.status, to_status):
        raise AuthorizationDenied("Status change not allowed")

    from_status = article.status
    article.status = to_status
    if to_status == ArticleStatus.REJECTED and rejection_reason is not None:
        article.rejection_reason = rejection_reason
    article.updated_at = utcnow()

    session.add(article)
    session.commit()
    session.refresh(article)

    logger.info(
        "Article %s: %s -> %s by user %s (%s)",
        article.id, from_status.value, to_status.value, actor.id, actor.role.value,
    )
    if to_status in NOTIFY_ON:
        notify_author(article)

    return article


def status_counts(rows: Iterable[Tuple[ArticleStatus, int]]) -> Dict[str, int]:
    """
    Overlay grouped (status, count) rows on a zeroed mapping of every status,
    so absent statuses still appear.
    """
    counts = {status.value: 0 for status in ArticleStatus}
    for status, count in rows:
        counts[ArticleStatus(status).value] = count
    return counts
