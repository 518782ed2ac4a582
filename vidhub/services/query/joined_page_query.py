"""
VidHub Joined Page Query — declarative filter / join / project / sort / paginate.

A ``PagePlan`` describes the read independently of SQL:

    PagePlan(
        source=Video,
        projection=("id", "title", "created_at"),
        filters=[Eq("owner_id", user_id), Contains("title", "cats")],
        joins=[OneToOne("owner", User, local_key="owner_id", fields=OWNER_FIELDS)],
        sort=Sort("created_at", descending=True),
        page=2, page_size=10,
    )

``JoinedPageQuery.run`` compiles it into one count query, one page query and
one batch query per ``OneToMany`` collection. One-to-one joins are inner
joins, so a row whose required join target is missing is dropped from both
the count and the page. Ordering always ends with the source ``id`` so that
rows with equal sort values keep the same order on every page.
"""
from __future__ import annotations

import math
import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from vidhub.core.config import get_settings
from vidhub.core.errors import InvalidArgument

settings = get_settings()


# ═══════════════════════════════════════════════════════════════════════
# Plan structure
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Eq:
    """Equality on ``field``; ``on`` names a join alias instead of the source."""
    field: str
    value: Any
    on: Optional[str] = None


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match."""
    field: str
    text: str
    on: Optional[str] = None


@dataclass(frozen=True)
class AnyOf:
    """Matches when at least one of ``predicates`` matches."""
    predicates: Tuple["Predicate", ...]


Predicate = Union[Eq, Contains, AnyOf]


@dataclass(frozen=True)
class OneToOne:
    """Required join: ``<parent>.<local_key> == <target>.<remote_key>``.

    ``parent`` names an earlier join; when unset the source model is the parent.
    The joined fields are nested under ``alias`` in the parent's dict.
    """
    alias: str
    target: Any
    local_key: str
    fields: Tuple[str, ...]
    remote_key: str = "id"
    parent: Optional[str] = None


@dataclass(frozen=True)
class OneToMany:
    """Ordered collection reached through a link table, loaded per page.

    ``filters`` apply to the collection target.
    """
    alias: str
    target: Any
    link: Any
    link_parent_key: str
    link_target_key: str
    fields: Tuple[str, ...]
    order_by: Optional[str] = None
    owner: Optional[OneToOne] = None
    filters: Tuple[Predicate, ...] = ()


_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class Sort:
    field: str = "created_at"
    descending: bool = True

    @classmethod
    def parse(cls, sort_by: Optional[str], sort_type: Optional[str]) -> "Sort":
        """Build a sort from ``sortBy`` / ``sortType`` request parameters."""
        name = _CAMEL_RE.sub("_", sort_by).lower() if sort_by else "created_at"
        direction = (sort_type or "desc").lower()
        if direction not in ("asc", "desc"):
            raise InvalidArgument("sortType must be 'asc' or 'desc'")
        return cls(field=name, descending=direction == "desc")


@dataclass
class PagePlan:
    source: Any
    projection: Tuple[str, ...]
    filters: Sequence[Predicate] = ()
    joins: Sequence[OneToOne] = ()
    collections: Sequence[OneToMany] = ()
    sort: Sort = field(default_factory=Sort)
    sortable: Optional[Tuple[str, ...]] = None
    page: int = 1
    page_size: int = 10


@dataclass
class PageResult:
    items: List[Dict[str, Any]]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int


# ═══════════════════════════════════════════════════════════════════════
# Executor
# ═══════════════════════════════════════════════════════════════════════

class JoinedPageQuery:
    """Runs a ``PagePlan`` against an async SQLAlchemy session."""

    def __init__(self, max_page_size: int = 100):
        self.max_page_size = max_page_size

    async def run(self, db: AsyncSession, plan: PagePlan) -> PageResult:
        page_size = self._validate(plan)
        source = plan.source

        # Resolve join targets in declaration order so children can find parents
        targets: Dict[str, Any] = {}
        onclauses = []
        for join in plan.joins:
            target = aliased(join.target, name=join.alias)
            parent = source if join.parent is None else targets[join.parent]
            onclauses.append((target, getattr(parent, join.local_key) == getattr(target, join.remote_key)))
            targets[join.alias] = target

        entities = {None: source, **targets}
        conditions = [self._predicate(entities, p) for p in plan.filters]

        def restrict(stmt):
            for target, onclause in onclauses:
                stmt = stmt.join(target, onclause)
            if conditions:
                stmt = stmt.where(*conditions)
            return stmt

        total = await db.scalar(restrict(select(func.count()).select_from(source))) or 0
        total_pages = math.ceil(total / page_size) if total else 0
        offset = (plan.page - 1) * page_size

        if offset >= total:
            return PageResult(
                items=[], total_items=total, total_pages=total_pages,
                current_page=plan.page, page_size=page_size,
            )

        columns = [getattr(source, name).label(name) for name in self._projection(plan)]
        for join in plan.joins:
            target = targets[join.alias]
            columns.extend(getattr(target, name).label(f"{join.alias}__{name}") for name in join.fields)

        sort_column = getattr(source, plan.sort.field)
        stmt = (
            restrict(select(*columns).select_from(source))
            .order_by(sort_column.desc() if plan.sort.descending else sort_column.asc(), source.id.asc())
            .offset(offset)
            .limit(page_size)
        )
        rows = (await db.execute(stmt)).mappings().all()
        items = [self._assemble(row, plan) for row in rows]

        for collection in plan.collections:
            await self._attach_collection(db, collection, items)

        return PageResult(
            items=items, total_items=total, total_pages=total_pages,
            current_page=plan.page, page_size=page_size,
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    def _validate(self, plan: PagePlan) -> int:
        if plan.page < 1:
            raise InvalidArgument("page must be 1 or greater")
        if plan.page_size < 1:
            raise InvalidArgument("limit must be 1 or greater")
        sortable = plan.sortable or tuple(plan.projection)
        if plan.sort.field not in sortable:
            raise InvalidArgument(f"Cannot sort by '{plan.sort.field}'")
        seen = set()
        for join in plan.joins:
            if join.parent is not None and join.parent not in seen:
                raise ValueError(f"Join '{join.alias}' references unknown parent '{join.parent}'")
            seen.add(join.alias)
        return min(plan.page_size, self.max_page_size)

    @staticmethod
    def _projection(plan: PagePlan) -> Tuple[str, ...]:
        if "id" in plan.projection:
            return tuple(plan.projection)
        return ("id",) + tuple(plan.projection)

    def _predicate(self, entities: Dict[Optional[str], Any], predicate: Predicate):
        if isinstance(predicate, AnyOf):
            return or_(*(self._predicate(entities, p) for p in predicate.predicates))
        if predicate.on not in entities:
            raise ValueError(f"Predicate on '{predicate.field}' references unknown join '{predicate.on}'")
        column = getattr(entities[predicate.on], predicate.field)
        if isinstance(predicate, Eq):
            return column.is_(None) if predicate.value is None else column == predicate.value
        if isinstance(predicate, Contains):
            escaped = (
                predicate.text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            )
            return column.ilike(f"%{escaped}%", escape="\\")
        raise TypeError(f"Unsupported predicate: {predicate!r}")

    def _assemble(self, row, plan: PagePlan) -> Dict[str, Any]:
        item = {name: row[name] for name in self._projection(plan)}
        nested: Dict[str, Dict[str, Any]] = {}
        for join in plan.joins:
            values = {name: row[f"{join.alias}__{name}"] for name in join.fields}
            nested[join.alias] = values
            parent = item if join.parent is None else nested[join.parent]
            parent[join.alias] = values
        return item

    async def _attach_collection(self, db: AsyncSession, collection: OneToMany, items: List[Dict[str, Any]]) -> None:
        if not items:
            return
        parent_ids = [item["id"] for item in items]
        link = collection.link
        target = aliased(collection.target, name=collection.alias)
        parent_key = getattr(link, collection.link_parent_key)

        columns = [parent_key.label("_parent_id")]
        columns.extend(getattr(target, name).label(name) for name in collection.fields)

        owner = None
        if collection.owner is not None:
            owner = aliased(collection.owner.target, name=f"{collection.alias}_{collection.owner.alias}")
            columns.extend(
                getattr(owner, name).label(f"{collection.owner.alias}__{name}")
                for name in collection.owner.fields
            )

        stmt = select(*columns).select_from(link).join(
            target, getattr(link, collection.link_target_key) == target.id
        )
        if owner is not None:
            stmt = stmt.join(
                owner,
                getattr(target, collection.owner.local_key) == getattr(owner, collection.owner.remote_key),
            )
        conditions = [self._predicate({None: target}, p) for p in collection.filters]
        stmt = stmt.where(parent_key.in_(parent_ids), *conditions)
        ordering = [target.id.asc()]
        if collection.order_by:
            ordering.insert(0, getattr(link, collection.order_by).asc())
        stmt = stmt.order_by(parent_key, *ordering)

        grouped: Dict[Any, List[Dict[str, Any]]] = defaultdict(list)
        for row in (await db.execute(stmt)).mappings():
            entry = {name: row[name] for name in collection.fields}
            if owner is not None:
                entry[collection.owner.alias] = {
                    name: row[f"{collection.owner.alias}__{name}"] for name in collection.owner.fields
                }
            grouped[row["_parent_id"]].append(entry)

        for item in items:
            item[collection.alias] = grouped.get(item["id"], [])


joined_page_query = JoinedPageQuery(max_page_size=settings.max_page_size)
