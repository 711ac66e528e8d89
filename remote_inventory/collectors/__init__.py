"""
Package des requêtes d'inventaire distantes

Ce package contient une requête par type d'inventaire :
- Requête de base (classe abstraite)
- Services Windows
- Tâches planifiées
"""

from ..core.models import CollectionKind
from .base import BaseQuery
from .services import ServicesQuery
from .scheduled_tasks import ScheduledTasksQuery

__all__ = ['BaseQuery', 'ServicesQuery', 'ScheduledTasksQuery', 'get_query']


def get_query(kind) -> BaseQuery:
    """
    Retourne la requête correspondant au type d'inventaire

    Args:
        kind: CollectionKind demandé

    Returns:
        BaseQuery: Instance de la requête
    """
    if kind == CollectionKind.SERVICES:
        return ServicesQuery()
    if kind == CollectionKind.SCHEDULED_TASKS:
        return ScheduledTasksQuery()
    raise ValueError(f"Type d'inventaire inconnu: {kind}")
