"""
Requête des services Windows installés

Les éléments proviennent de Win32_Service (Name, State, StartName, Description).
"""

from typing import Dict, Any

from .base import BaseQuery
from ..core.models import CollectionKind, ServiceRecord


# Identités système réservées
SYSTEM_AUTHORITY_PREFIX = 'NT AUTHORITY'
LOCAL_SYSTEM_ACCOUNT = 'LocalSystem'


class ServicesQuery(BaseQuery):
    """
    Requête des services installés

    Un service est "par défaut" lorsqu'il tourne sous un compte système :
    identité absente, LocalSystem ou préfixée par NT AUTHORITY.
    """

    kind = CollectionKind.SERVICES

    def normalize(self, host: str, item: Dict[str, Any]) -> ServiceRecord:
        return ServiceRecord(
            host=host,
            service_name=self._clean_string(item.get('Name')),
            state=self._clean_string(item.get('State')),
            run_as=self._optional_string(item.get('StartName')),
            description=self._optional_string(item.get('Description'))
        )

    def is_default(self, record: ServiceRecord) -> bool:
        run_as = record.run_as
        if not run_as:
            return True

        # Comparaisons insensibles à la casse, comme -like / -eq en PowerShell
        run_as = run_as.lower()
        return (
            run_as == LOCAL_SYSTEM_ACCOUNT.lower()
            or run_as.startswith(SYSTEM_AUTHORITY_PREFIX.lower())
        )
