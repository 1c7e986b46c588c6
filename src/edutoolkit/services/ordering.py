"""
Drag-and-drop ordering of a course's resources.

A drag is an explicit, scoped interaction: ``DragContext`` holds the single
in-flight drag (``Idle`` or ``Dragging``), ``plan_drop`` turns a drop into
the new module and the new full ordering, and ``CourseBoard`` applies that
plan to its local list before persisting it. If persisting fails the local
list is restored, the same as the favorite and completion toggles.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Set, Union

from sqlalchemy.orm import Session

from ..repositories.base import NotFoundError
from . import interactions
from .resources import get_course_resources, move_and_reorder, reorder_resources

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleTarget:
    """A module container; ``module_id=None`` is "General"."""
    module_id: Optional[str] = None


@dataclass(frozen=True)
class ResourceTarget:
    resource_id: str


DropTarget = Union[ModuleTarget, ResourceTarget]


@dataclass(frozen=True)
class BoardItem:
    id: str
    course_id: str
    module_id: Optional[str]
    title: str
    type: str
    url: str
    order: int
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_resource(cls, resource) -> "BoardItem":
        return cls(
            id=resource.id,
            course_id=resource.course_id,
            module_id=resource.module_id,
            title=resource.title,
            type=resource.type,
            url=resource.url,
            order=resource.order,
            tags=list(resource.tags or []),
        )


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    resource: BoardItem
    hover_module_id: Optional[str]


DragState = Union[Idle, Dragging]


@dataclass(frozen=True)
class DropPlan:
    resource_id: str
    source_module_id: Optional[str]
    target_module_id: Optional[str]
    from_index: int
    to_index: int
    ordered_ids: List[str]

    @property
    def module_changed(self) -> bool:
        return self.source_module_id != self.target_module_id

    @property
    def order_changed(self) -> bool:
        return self.from_index != self.to_index

    @property
    def changed(self) -> bool:
        return self.module_changed or self.order_changed


def _index_of(items: Sequence, item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise NotFoundError("Resource", item_id)


def array_move(ids: Sequence[str], from_index: int, to_index: int) -> List[str]:
    moved = list(ids)
    moved.insert(to_index, moved.pop(from_index))
    return moved


def plan_drop(resources: Sequence, dragged_id: str, target: DropTarget) -> DropPlan:
    """
    Compute where a dropped resource ends up.

    ``resources`` is the whole course, sorted by order. Dropping onto a
    resource adopts that resource's module and takes its index in the
    course-wide list, not a position relative to the module. Dropping onto
    a different module's container places the resource right after that
    module's last resource, or at the end of the list when the module is
    empty. Dropping onto the resource's own module container changes
    nothing.

    Raises:
        NotFoundError: If the dragged or target resource is not in ``resources``
    """
    ids = [r.id for r in resources]
    from_index = _index_of(resources, dragged_id)
    dragged = resources[from_index]

    if isinstance(target, ResourceTarget):
        to_index = _index_of(resources, target.resource_id)
        target_module_id = resources[to_index].module_id
        ordered_ids = array_move(ids, from_index, to_index)
    else:
        target_module_id = target.module_id
        if target_module_id == dragged.module_id:
            to_index = from_index
            ordered_ids = ids
        else:
            remaining = [r for r in resources if r.id != dragged_id]
            to_index = len(remaining)
            for index, item in enumerate(remaining):
                if item.module_id == target_module_id:
                    to_index = index + 1
            ordered_ids = [r.id for r in remaining]
            ordered_ids.insert(to_index, dragged_id)

    return DropPlan(
        resource_id=dragged_id,
        source_module_id=dragged.module_id,
        target_module_id=target_module_id,
        from_index=from_index,
        to_index=to_index,
        ordered_ids=ordered_ids,
    )


class DragContext:
    """The single in-flight drag of one board."""

    def __init__(self, items: Callable[[], Sequence[BoardItem]]):
        self._items = items
        self.state: DragState = Idle()

    @property
    def dragging(self) -> bool:
        return isinstance(self.state, Dragging)

    def start(self, resource_id: str) -> None:
        items = self._items()
        resource = items[_index_of(items, resource_id)]
        self.state = Dragging(resource=resource, hover_module_id=resource.module_id)

    def over(self, target: Optional[DropTarget]) -> bool:
        """
        Track the hovered target.

        Returns:
            True when the candidate module differs from the dragged resource's module
        """
        if not isinstance(self.state, Dragging):
            return False

        candidate = self.state.hover_module_id
        if isinstance(target, ModuleTarget):
            candidate = target.module_id
        elif isinstance(target, ResourceTarget):
            for item in self._items():
                if item.id == target.resource_id:
                    candidate = item.module_id
                    break

        self.state = replace(self.state, hover_module_id=candidate)
        return candidate != self.state.resource.module_id

    def cancel(self) -> None:
        self.state = Idle()

    def drop(self, target: Optional[DropTarget]) -> Optional[DropPlan]:
        state = self.state
        self.state = Idle()
        if not isinstance(state, Dragging) or target is None:
            return None
        return plan_drop(self._items(), state.resource.id, target)


class CourseBoard:
    """
    Local view of one course's resources for a single user.

    Every change is applied to the local state first and then persisted;
    a persistence failure restores the previous local state and re-raises.
    """

    def __init__(self, db: Session, course_id: str, user_id: Optional[str] = None):
        self.db = db
        self.course_id = course_id
        self.user_id = user_id
        self.items: List[BoardItem] = []
        self.favorite_ids: Set[str] = set()
        self.completed_ids: Set[str] = set()
        self.drag = DragContext(lambda: self.items)
        self.refresh()

    def refresh(self) -> None:
        self.items = [BoardItem.from_resource(r) for r in get_course_resources(self.db, self.course_id)]
        if self.user_id is not None:
            self.favorite_ids = {f.resource_id for f in interactions.get_user_favorites(self.db, self.user_id)}
            self.completed_ids = {c.resource_id for c in interactions.get_user_completed(self.db, self.user_id, self.course_id)}

    def item(self, resource_id: str) -> BoardItem:
        return self.items[_index_of(self.items, resource_id)]

    def module_items(self, module_id: Optional[str]) -> List[BoardItem]:
        return [item for item in self.items if item.module_id == module_id]

    def drop(self, target: Optional[DropTarget]) -> Optional[DropPlan]:
        plan = self.drag.drop(target)
        if plan is None:
            return None
        if not plan.changed:
            self.refresh()
            return plan
        self.apply(plan)
        return plan

    def apply(self, plan: DropPlan) -> None:
        previous = self.items
        by_id = {item.id: item for item in previous}

        updated = []
        for index, item_id in enumerate(plan.ordered_ids):
            item = replace(by_id[item_id], order=index)
            if item_id == plan.resource_id:
                item = replace(item, module_id=plan.target_module_id)
            updated.append(item)
        self.items = updated

        try:
            if plan.module_changed:
                move_and_reorder(self.db, plan.resource_id, plan.target_module_id, plan.ordered_ids)
            else:
                reorder_resources(self.db, plan.ordered_ids)
        except Exception as e:
            self.items = previous
            logger.error(f"Error persisting drop of resource {plan.resource_id}: {e}")
            raise

    def reorder(self, ordered_ids: Sequence[str]) -> None:
        """Explicit reorder of the whole list, e.g. from keyboard sorting."""
        previous = self.items
        by_id = {item.id: item for item in previous}
        self.items = [replace(by_id[i], order=index) for index, i in enumerate(ordered_ids)]
        try:
            reorder_resources(self.db, ordered_ids)
        except Exception as e:
            self.items = previous
            logger.error(f"Error reordering course {self.course_id}: {e}")
            raise

    def toggle_favorite(self, resource_id: str) -> bool:
        return self._toggle(self.favorite_ids, resource_id, interactions.toggle_favorite, "favorite")

    def toggle_completed(self, resource_id: str) -> bool:
        return self._toggle(self.completed_ids, resource_id, interactions.toggle_completed, "completed")

    def _toggle(self, local: Set[str], resource_id: str, persist, label: str) -> bool:
        if self.user_id is None:
            raise ValueError("Board has no user")
        item = self.item(resource_id)

        was_active = resource_id in local
        if was_active:
            local.discard(resource_id)
        else:
            local.add(resource_id)

        try:
            return persist(self.db, self.user_id, item)
        except Exception as e:
            if was_active:
                local.add(resource_id)
            else:
                local.discard(resource_id)
            logger.error(f"Error toggling {label} for {resource_id}: {e}")
            raise


def move_resource(db: Session, course_id: str, resource_id: str, target: DropTarget) -> DropPlan:
    """Run one complete drag of ``resource_id`` onto ``target``."""
    board = CourseBoard(db, course_id)
    board.drag.start(resource_id)
    return board.drop(target)
