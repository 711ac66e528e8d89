"""
Résolution des hôtes pour le collecteur d'inventaire

Transforme un nom saisi par l'utilisateur en cible de connexion complète (FQDN) :
1. Sonde de disponibilité (un ping, timeout court)
2. Requête d'identité distante (nom + domaine)

Aucune nouvelle tentative : le premier échec est définitif pour l'hôte.
"""

from .errors import ResolutionFailure, TransportError
from .models import ResolvedHost


class HostResolver:
    """Résout les noms d'hôtes en FQDN via le transport"""

    def __init__(self, transport, logger):
        """
        Args:
            transport: Transport exposant probe() et query_identity()
            logger: Instance de InventoryLogger
        """
        self.transport = transport
        self.logger = logger.get_logger()

    def resolve(self, host_name: str) -> ResolvedHost:
        """
        Résout un hôte

        Args:
            host_name: Nom court ou adresse saisi par l'utilisateur

        Returns:
            ResolvedHost: Nom court et FQDN

        Raises:
            ResolutionFailure: Hôte injoignable ou identité non récupérable
        """
        if not host_name or not host_name.strip():
            raise ResolutionFailure(host_name, ResolutionFailure.UNREACHABLE, "nom d'hôte vide")

        # Un nom commençant par un tiret serait lu comme une option de ping
        if host_name.strip().startswith('-'):
            raise ResolutionFailure(host_name, ResolutionFailure.UNREACHABLE, "nom d'hôte invalide")

        if not self.transport.probe(host_name):
            raise ResolutionFailure(host_name, ResolutionFailure.UNREACHABLE)

        try:
            name, domain = self.transport.query_identity(host_name)
        except TransportError as e:
            raise ResolutionFailure(host_name, ResolutionFailure.IDENTITY_QUERY_FAILED, str(e))

        fqdn = f"{name}.{domain}" if domain else name
        self.logger.debug(f"[{host_name}] Résolu en {fqdn}")
        return ResolvedHost(short_name=host_name, fqdn=fqdn)
