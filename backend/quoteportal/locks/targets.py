# backend/quoteportal/locks/targets.py
from dataclasses import dataclass


@dataclass(frozen=True)
class LockTarget:
    """Where a lockable resource lives and how to talk about it.

    Plain data only: the storage adapter resolves `table` and the three
    column names against the metadata at call time.
    """

    kind: str  # "article"
    table: str  # "articles"
    segment: str  # URL segment under /api
    not_found_message: str
    locked_message: str  # write-path conflict
    lock_error_message: str  # acquire conflict
    unlock_error_message: str
    id_column: str = "id"
    blocked_column: str = "blocked"
    blocked_by_column: str = "blocked_by"


ARTICLES = LockTarget(
    kind="article",
    table="articles",
    segment="articles",
    not_found_message="Article not found",
    locked_message="Article is being edited by another user",
    lock_error_message="Article is already being edited",
    unlock_error_message="Can only unlock articles you have locked",
)

BLOCKS = LockTarget(
    kind="block",
    table="blocks",
    segment="blocks",
    not_found_message="Block not found",
    locked_message="Block is being edited by another user",
    lock_error_message="Block is already being edited",
    unlock_error_message="Can only unlock blocks you have locked",
)

QUOTE_VERSIONS = LockTarget(
    kind="quote version",
    table="quote_versions",
    segment="quote-versions",
    not_found_message="Quote version not found",
    locked_message="Quote version is being edited by another user",
    lock_error_message="Quote version is already being edited",
    unlock_error_message="Cannot unlock quote version locked by another user",
)

SALES_OPPORTUNITIES = LockTarget(
    kind="sales opportunity",
    table="sales_opportunities",
    segment="sales-opportunities",
    not_found_message="Sales opportunity not found",
    locked_message="Sales opportunity is being edited by another user",
    lock_error_message="Sales opportunity is already being edited",
    unlock_error_message="Can only unlock sales opportunities you have locked",
)

LOCK_TARGETS: dict[str, LockTarget] = {
    t.kind: t for t in (ARTICLES, BLOCKS, QUOTE_VERSIONS, SALES_OPPORTUNITIES)
}
