"""
YAML-backed persistence for event categories.

Each category is stored as one document, ``<data_dir>/<category_id>.yaml``.
Writes and deletes hold a file lock so two processes sharing a data
directory never interleave.
"""
import logging
import os

import yaml
from filelock import FileLock

from shuttle.models import EventCategory

logger = logging.getLogger(__name__)

LOCK_TIMEOUT_SECONDS = 10


class CategoryRepository:
    def __init__(self, data_dir):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)
        self._lock = FileLock(os.path.join(self.data_dir, '.lock'), timeout=LOCK_TIMEOUT_SECONDS)

    def _path(self, category_id):
        return os.path.join(self.data_dir, f"{category_id}.yaml")

    def save(self, category: EventCategory):
        """Write ``category`` as a whole, replacing any previous document."""
        with self._lock:
            with open(self._path(category.id), 'w', encoding='utf-8') as f:
                yaml.safe_dump(category.to_dict(), f, default_flow_style=False, allow_unicode=True,
                               sort_keys=False)

    def load(self, category_id):
        """Load a category, or None when it does not exist or cannot be read."""
        path = self._path(category_id)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
            return EventCategory.from_dict(data) if data else None
        except (yaml.YAMLError, KeyError, TypeError) as e:
            logger.warning(f'Failed to parse {path}: {e}')
            return None

    def list_ids(self):
        return sorted(
            name[:-len('.yaml')]
            for name in os.listdir(self.data_dir)
            if name.endswith('.yaml')
        )

    def delete(self, category_id):
        """Remove a stored category. Returns False when there was nothing to remove."""
        path = self._path(category_id)
        with self._lock:
            if not os.path.exists(path):
                return False
            os.remove(path)
        return True
