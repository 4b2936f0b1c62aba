"""Category-set reconciliation for categorizable owners.

Responsibilities:
- resolve a reference to category ids and apply it to an owner as an attach,
  sync or detach delta against the association store
- announce every mutation with a ``<namespace>.<mode>ing`` notification before
  and a ``<namespace>.<mode>ed`` notification after the store call
- queue references on owners without identity and flush them on creation
- clear an owner's associations on deletion
- answer any/all membership questions from the owner's loaded categories

Notifications and the store mutation do not share a transaction: a failing
mutation leaves the "before" notification published and skips the "after" one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from categorizable.config import DEFAULT_EVENT_NAMESPACE
from categorizable.domain import membership
from categorizable.domain.model import CategorizeMode, KeyColumn
from categorizable.domain.ports.notifications import CategoryEvent, NullNotificationSink
from categorizable.domain.refs import category_ref, is_empty

if TYPE_CHECKING:
    from categorizable.domain.lifecycle import LifecycleSignals
    from categorizable.domain.model import Categorizable, Category
    from categorizable.domain.ports.notifications import NotificationSink
    from categorizable.domain.ports.persistence import AssociationChanges, AssociationStore
    from categorizable.domain.refs import CategoryInput
    from categorizable.domain.resolver import CategoryReferenceResolver

log = logging.getLogger(__name__)


class CategorySetReconciler:
    """Apply category references to owners and evaluate membership."""

    def __init__(
        self,
        resolver: CategoryReferenceResolver,
        store: AssociationStore,
        *,
        notifications: NotificationSink | None = None,
        event_namespace: str = DEFAULT_EVENT_NAMESPACE,
    ) -> None:
        self.resolver = resolver
        self.store = store
        self.notifications = notifications or NullNotificationSink()
        self.event_namespace = event_namespace

    # --- mutations ---------------------------------------------------------

    def apply(
        self, owner: Categorizable, categories: CategoryInput, mode: CategorizeMode
    ) -> AssociationChanges:
        """Resolve ``categories`` and apply them to ``owner`` under ``mode``.

        Raises ``OwnerNotPersistedError`` when ``owner`` has no id yet.
        """

        key = owner.owner_key()
        mode = CategorizeMode(mode)
        category_ids = tuple(sorted(self.resolver.resolve(category_ref(categories))))
        log.debug(
            "%s %s#%s with categories %s",
            mode.value,
            key.categorizable_type,
            key.categorizable_id,
            category_ids,
        )

        self._publish(mode.before_event, owner, mode, category_ids)
        if mode is CategorizeMode.ATTACH:
            changes = self.store.attach(key, category_ids)
        elif mode is CategorizeMode.SYNC:
            changes = self.store.sync(key, category_ids)
        else:
            changes = self.store.detach(key, category_ids)
        self._publish(mode.after_event, owner, mode, category_ids)

        owner.set_loaded_categories(self.store.load_categories(key))
        if changes.changed:
            log.info(
                "Categories of %s#%s changed: attached=%s detached=%s",
                key.categorizable_type,
                key.categorizable_id,
                list(changes.attached),
                list(changes.detached),
            )
        return changes

    def categorize(self, owner: Categorizable, categories: CategoryInput) -> AssociationChanges:
        """Attach ``categories`` without detaching anything."""
        return self.apply(owner, categories, CategorizeMode.ATTACH)

    def recategorize(
        self, owner: Categorizable, categories: CategoryInput
    ) -> AssociationChanges:
        """Replace the owner's categories with exactly ``categories``."""
        return self.apply(owner, categories, CategorizeMode.SYNC)

    def uncategorize(
        self, owner: Categorizable, categories: CategoryInput
    ) -> AssociationChanges:
        """Detach ``categories``; ids that are not attached are ignored."""
        return self.apply(owner, categories, CategorizeMode.DETACH)

    def assign(self, owner: Categorizable, categories: CategoryInput) -> AssociationChanges | None:
        """Attach now, or queue until the owner is created if it has no id yet."""

        ref = category_ref(categories)
        if not owner.is_persisted:
            owner.queue_categories(ref)
            return None
        return self.apply(owner, ref, CategorizeMode.ATTACH)

    # --- lifecycle ---------------------------------------------------------

    def subscribe(self, signals: LifecycleSignals) -> None:
        signals.on_created(self.flush_pending)
        signals.on_deleted(self.clear)

    def flush_pending(self, owner: Categorizable) -> AssociationChanges | None:
        """Attach the categories queued before ``owner`` had an id."""

        pending = owner.take_pending_categories()
        if pending is None or is_empty(pending):
            return None
        return self.apply(owner, pending, CategorizeMode.ATTACH)

    def clear(self, owner: Categorizable) -> AssociationChanges:
        """Remove every association of ``owner``."""
        return self.apply(owner, None, CategorizeMode.SYNC)

    # --- reads -------------------------------------------------------------

    def categories(self, owner: Categorizable, *, refresh: bool = False) -> tuple[Category, ...]:
        """Return the owner's categories, loading them on first use."""

        if refresh or not owner.categories_loaded:
            owner.set_loaded_categories(self.store.load_categories(owner.owner_key()))
        return owner.categories

    def has_any(self, owner: Categorizable, categories: CategoryInput) -> bool:
        return membership.has_any(self.categories(owner), category_ref(categories))

    def has_category(self, owner: Categorizable, categories: CategoryInput) -> bool:
        return self.has_any(owner, categories)

    def has_all(self, owner: Categorizable, categories: CategoryInput) -> bool:
        return membership.has_all(self.categories(owner), category_ref(categories))

    def category_list(
        self, owner: Categorizable, key_column: KeyColumn = KeyColumn.SLUG
    ) -> dict[int | str, str]:
        """Map each of the owner's categories to its name, keyed by ``key_column``."""

        key_column = KeyColumn(key_column)
        listing: dict[int | str, str] = {}
        for category in self.categories(owner, refresh=True):
            key = category.key(key_column)
            if key is not None:
                listing[key] = category.name
        return listing

    def _publish(
        self,
        suffix: str,
        owner: Categorizable,
        mode: CategorizeMode,
        category_ids: tuple[int, ...],
    ) -> None:
        self.notifications.publish(
            CategoryEvent(
                name=f"{self.event_namespace}.{suffix}",
                owner=owner,
                mode=mode,
                category_ids=category_ids,
            )
        )
