"""Category catalog: client-local configuration, not a stored relation."""

from __future__ import annotations

import logging
import threading
import uuid
from pathlib import Path

from pydantic import TypeAdapter

from family_ledger.schemas.category import Category
from family_ledger.utils.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="food", label="餐饮美食", icon="🍚", direction="expense", is_default=True),
    Category(id="transport", label="交通出行", icon="🚗", direction="expense", is_default=True),
    Category(id="shopping", label="购物消费", icon="🛍️", direction="expense", is_default=True),
    Category(id="housing", label="居住物业", icon="🏠", direction="expense", is_default=True),
    Category(id="entertainment", label="休闲娱乐", icon="🎮", direction="expense", is_default=True),
    Category(id="health", label="医疗健康", icon="💊", direction="expense", is_default=True),
    Category(id="other", label="其他支出", icon="📝", direction="expense", is_default=True),
    Category(id="salary", label="工资薪水", icon="💰", direction="income", is_default=True),
    Category(id="bonus", label="奖金福利", icon="🧧", direction="income", is_default=True),
    Category(id="investment", label="投资理财", icon="📈", direction="income", is_default=True),
    Category(id="media", label="自媒体", icon="📹", direction="income", is_default=True),
    Category(id="custom", label="其他收入", icon="➕", direction="income", is_default=True),
)

_categories_adapter = TypeAdapter(list[Category])


class CategoryCatalog:
    """Default categories plus user-added ones, optionally mirrored to a JSON file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._items: dict[str, Category] = {item.id: item for item in DEFAULT_CATEGORIES}
        if self.path is not None and self.path.exists():
            self._load()

    def _load(self) -> None:
        stored = _categories_adapter.validate_json(self.path.read_bytes())
        for item in stored:
            self._items[item.id] = item
        logger.info("Loaded %s categories from %s", len(stored), self.path)

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_categories_adapter.dump_json(list(self._items.values()), indent=2))

    def as_mapping(self) -> dict[str, Category]:
        """Return a snapshot keyed by category id."""
        with self._lock:
            return dict(self._items)

    def list_categories(self, direction: str | None = None) -> list[Category]:
        """Return categories in insertion order, optionally for one direction."""
        with self._lock:
            items = list(self._items.values())
        if direction:
            items = [item for item in items if item.direction == direction]
        return items

    def get(self, category_id: str) -> Category:
        with self._lock:
            item = self._items.get(category_id)
        if item is None:
            raise NotFoundError("Category")
        return item

    def add(self, label: str, icon: str, direction: str) -> Category:
        """Add a custom category under a generated id."""
        item = Category(
            id=uuid.uuid4().hex[:9],
            label=label,
            icon=icon,
            direction=direction,
            is_default=False,
        )
        with self._lock:
            self._items[item.id] = item
            self._save()
        return item

    def delete(self, category_id: str) -> Category:
        """Remove a custom category; default categories cannot be removed."""
        with self._lock:
            item = self._items.get(category_id)
            if item is None:
                raise NotFoundError("Category")
            if item.is_default:
                raise ConflictError("Default categories cannot be deleted")
            del self._items[category_id]
            self._save()
        return item

    def replace(self, items: list[Category]) -> None:
        """Reset to the defaults plus ``items`` (used when importing a backup)."""
        with self._lock:
            self._items = {item.id: item for item in DEFAULT_CATEGORIES}
            for item in items:
                self._items[item.id] = item
            self._save()
