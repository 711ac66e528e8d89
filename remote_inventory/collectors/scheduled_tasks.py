"""
Requête des tâches planifiées

Les éléments proviennent de Get-ScheduledTask (nom, chemin, état, principal,
description, auteur).
"""

from typing import Dict, Any

from .base import BaseQuery
from ..core.models import CollectionKind, TaskRecord


# Espace de noms réservé à l'éditeur et chemin racine
VENDOR_NAMESPACE = '\\Microsoft\\'
ROOT_PATH = '\\'


class ScheduledTasksQuery(BaseQuery):
    """
    Requête des tâches planifiées

    Une tâche est "par défaut" lorsqu'elle se trouve sous l'espace de noms
    de l'éditeur ou directement à la racine.
    """

    kind = CollectionKind.SCHEDULED_TASKS

    def normalize(self, host: str, item: Dict[str, Any]) -> TaskRecord:
        return TaskRecord(
            host=host,
            task_name=self._clean_string(item.get('TaskName')),
            path=self._clean_string(item.get('TaskPath')),
            state=self._clean_string(item.get('State')),
            run_as=self._optional_string(item.get('RunAs')),
            description=self._optional_string(item.get('Description')),
            author=self._optional_string(item.get('Author'))
        )

    def is_default(self, record: TaskRecord) -> bool:
        return (
            VENDOR_NAMESPACE.lower() in record.path.lower()
            or record.path == ROOT_PATH
        )
