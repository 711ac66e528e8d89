"""
Classe de base pour toutes les requêtes d'inventaire distantes

Ce module définit l'interface commune des requêtes :
- Descripteur envoyé au transport
- Normalisation des éléments bruts en enregistrements
- Filtre des éléments "par défaut" (comptes système, espace éditeur)
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional

from ..core.models import CollectionKind, InventoryRecord, QueryDescriptor


class BaseQuery(ABC):
    """
    Classe de base abstraite pour toutes les requêtes d'inventaire

    Une requête décrit l'énumération distante (données uniquement), convertit
    les éléments reçus en enregistrements typés et applique le filtre des
    éléments par défaut.
    """

    kind: CollectionKind = None

    def describe(self, skip_defaults: bool = False) -> QueryDescriptor:
        """
        Construit le descripteur envoyé au transport

        Args:
            skip_defaults: Exclure les éléments par défaut

        Returns:
            QueryDescriptor: Descripteur de la requête
        """
        return QueryDescriptor(kind=self.kind, skip_defaults=skip_defaults)

    @abstractmethod
    def normalize(self, host: str, item: Dict[str, Any]) -> InventoryRecord:
        """
        Convertit un élément brut en enregistrement

        Args:
            host: Nom court de l'hôte (pas le FQDN)
            item: Élément brut décodé

        Returns:
            InventoryRecord: Enregistrement normalisé
        """

    @abstractmethod
    def is_default(self, record: InventoryRecord) -> bool:
        """Indique si l'enregistrement est un élément par défaut du système"""

    def build_records(self, host: str, items: List[Dict[str, Any]],
                      skip_defaults: bool = False) -> List[InventoryRecord]:
        """
        Normalise et filtre les éléments bruts d'un hôte

        Args:
            host: Nom court de l'hôte
            items: Éléments bruts dans l'ordre de la requête
            skip_defaults: Exclure les éléments par défaut

        Returns:
            list: Enregistrements dans l'ordre de la requête
        """
        records = [self.normalize(host, item) for item in items]
        if skip_defaults:
            records = [record for record in records if not self.is_default(record)]
        return records

    def _clean_string(self, value: Any) -> str:
        """
        Nettoie une chaîne de caractères

        Args:
            value: Valeur à nettoyer

        Returns:
            str: Chaîne nettoyée
        """
        if value is None:
            return ""

        value = str(value).strip()

        # Supprimer les caractères de contrôle puis les espaces multiples
        value = ''.join(char for char in value if char.isprintable())
        return re.sub(r'\s+', ' ', value)

    def _optional_string(self, value: Any) -> Optional[str]:
        """Comme _clean_string, mais une valeur absente ou vide donne None"""
        cleaned = self._clean_string(value)
        return cleaned or None
