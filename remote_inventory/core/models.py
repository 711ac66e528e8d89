"""
Modèle de données du collecteur d'inventaire distant

Ce module définit les structures manipulées pendant une collecte :
- Types d'inventaire (services, tâches planifiées)
- Hôte résolu (nom court + FQDN)
- Enregistrements d'inventaire (variantes service / tâche)
- Requête et résultat de collecte
"""

from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Dict, Any, List, Optional, Iterator


class CollectionKind(Enum):
    """Type d'inventaire collecté sur les machines distantes"""

    SERVICES = 'services'
    SCHEDULED_TASKS = 'tasks'

    @classmethod
    def from_value(cls, value: str) -> 'CollectionKind':
        """
        Convertit une valeur de ligne de commande en CollectionKind

        Args:
            value: 'services' ou 'tasks'

        Returns:
            CollectionKind: Type correspondant
        """
        for kind in cls:
            if kind.value == value.lower():
                return kind
        raise ValueError(f"Type d'inventaire inconnu: {value}")


@dataclass(frozen=True)
class ResolvedHost:
    """Hôte dont le nom complet (FQDN) a été résolu"""

    short_name: str
    fqdn: str


@dataclass(frozen=True)
class QueryDescriptor:
    """
    Description d'une requête d'inventaire envoyée au transport

    Seules des données traversent la frontière du transport : le type
    d'inventaire et les paramètres de filtrage. Le transport choisit le
    script d'énumération parmi une liste fixe.
    """

    kind: CollectionKind
    skip_defaults: bool = False


class InventoryRecord:
    """
    Enregistrement d'inventaire (classe de base)

    Toutes les variantes partagent le nom de l'hôte (nom court saisi par
    l'utilisateur) et l'état de l'élément. La base n'est pas une dataclass :
    chaque variante déclare ces champs à sa place dans l'en-tête du rapport.
    """

    host: str
    state: str

    kind = None

    @classmethod
    def field_names(cls) -> List[str]:
        """Noms des champs dans l'ordre de déclaration"""
        return [f.name for f in fields(cls)]

    def to_dict(self) -> Dict[str, Any]:
        """Représentation plate champ -> valeur"""
        return asdict(self)


@dataclass(frozen=True)
class ServiceRecord(InventoryRecord):
    """Service Windows installé sur un hôte"""

    host: str
    service_name: str
    state: str
    run_as: Optional[str]
    description: Optional[str]

    kind = CollectionKind.SERVICES


@dataclass(frozen=True)
class TaskRecord(InventoryRecord):
    """Tâche planifiée présente sur un hôte"""

    host: str
    task_name: str
    path: str
    state: str
    run_as: Optional[str]
    description: Optional[str]
    author: Optional[str]

    kind = CollectionKind.SCHEDULED_TASKS


RECORD_TYPES = {
    CollectionKind.SERVICES: ServiceRecord,
    CollectionKind.SCHEDULED_TASKS: TaskRecord,
}


@dataclass
class CollectionRequest:
    """
    Requête de collecte telle que fournie par l'utilisateur

    Une seule source de machines est acceptée : la liste explicite ou le
    fichier. Les deux ensemble constituent une erreur de configuration,
    aucune des deux donne une collecte vide.
    """

    host_list: Optional[List[str]] = None
    host_list_file: Optional[str] = None
    skip_defaults: bool = False
    kind: CollectionKind = CollectionKind.SERVICES


@dataclass
class CollectionResult:
    """
    Résultat d'une collecte

    Les enregistrements sont ordonnés selon la liste des hôtes puis selon
    l'ordre de la requête sur chaque hôte. Les échecs par hôte sont conservés
    pour le rapport d'exécution mais ne font pas partie des données exportées.
    """

    kind: CollectionKind
    records: List[InventoryRecord] = field(default_factory=list)
    failures: List[Exception] = field(default_factory=list)
    hosts_total: int = 0
    duration_seconds: float = 0.0

    def __iter__(self) -> Iterator[InventoryRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def field_names(self) -> List[str]:
        """Colonnes du rapport pour ce type d'inventaire"""
        return RECORD_TYPES[self.kind].field_names()

    def as_rows(self) -> List[Dict[str, Any]]:
        """
        Convertit le résultat en liste de dictionnaires plats

        Returns:
            list: Une ligne par enregistrement
        """
        return [record.to_dict() for record in self.records]

    def hosts_with_records(self) -> List[str]:
        """Hôtes ayant fourni au moins un enregistrement, dans l'ordre"""
        seen = []
        for record in self.records:
            if record.host not in seen:
                seen.append(record.host)
        return seen
