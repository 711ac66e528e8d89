"""
Erreurs du collecteur d'inventaire distant

Seule ConfigurationError interrompt une collecte. Les autres erreurs sont
interceptées hôte par hôte : l'hôte est ignoré et la collecte continue.
"""

from typing import Optional


class InventoryError(Exception):
    """Classe de base de toutes les erreurs du collecteur"""


class ConfigurationError(InventoryError):
    """Configuration d'entrée contradictoire ou inutilisable (fatale)"""

    CONFLICTING_HOST_SOURCE = 'ConflictingHostSource'
    UNUSABLE_HOST_SOURCE = 'UnusableHostSource'

    def __init__(self, reason: str, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        message = reason if not detail else f"{reason}: {detail}"
        super().__init__(message)


class ResolutionFailure(InventoryError):
    """Hôte injoignable ou identité distante non récupérable"""

    UNREACHABLE = 'Unreachable'
    IDENTITY_QUERY_FAILED = 'IdentityQueryFailed'

    def __init__(self, host: str, reason: str, detail: Optional[str] = None):
        self.host = host
        self.reason = reason
        self.detail = detail
        message = f"{host}: {reason}" if not detail else f"{host}: {reason} ({detail})"
        super().__init__(message)


class QueryFailure(InventoryError):
    """Ouverture de session ou requête échouée après une résolution réussie"""

    SESSION_OPEN = 'SessionOpen'
    QUERY = 'Query'

    def __init__(self, host: str, stage: str, detail: Optional[str] = None):
        self.host = host
        self.stage = stage
        self.detail = detail
        message = f"{host}: {stage}" if not detail else f"{host}: {stage} ({detail})"
        super().__init__(message)


class CleanupWarning(InventoryError):
    """Fermeture de session échouée, journalisée uniquement"""

    def __init__(self, host: str, detail: Optional[str] = None):
        self.host = host
        self.detail = detail
        super().__init__(f"{host}: fermeture de session échouée ({detail})")


class TransportError(InventoryError):
    """Erreur remontée par le transport WinRM ou la sonde réseau"""
