"""
Exécution des requêtes d'inventaire sur un hôte résolu

Pour chaque hôte :
- Ouverture d'une session sur le FQDN, étiquetée avec le nom court
- Exécution d'une seule énumération en lecture seule
- Normalisation et filtrage des éléments
- Fermeture de la session sur tous les chemins (échec journalisé uniquement)
"""

from typing import List

from ..collectors import get_query
from .errors import CleanupWarning, QueryFailure, TransportError
from .models import CollectionKind, InventoryRecord, ResolvedHost


class RemoteQueryExecutor:
    """Exécute une requête d'inventaire dans une session distante"""

    def __init__(self, transport, logger):
        """
        Args:
            transport: Transport exposant open_session()
            logger: Instance de InventoryLogger
        """
        self.transport = transport
        self.logger = logger.get_logger()

    def collect(self, resolved: ResolvedHost, kind: CollectionKind,
                skip_defaults: bool = False) -> List[InventoryRecord]:
        """
        Collecte l'inventaire d'un hôte

        Args:
            resolved: Hôte résolu
            kind: Type d'inventaire
            skip_defaults: Exclure les éléments par défaut

        Returns:
            list: Enregistrements de l'hôte (éventuellement vide)

        Raises:
            QueryFailure: Ouverture de session ou requête échouée
        """
        query = get_query(kind)
        host = resolved.short_name

        try:
            session = self.transport.open_session(resolved.fqdn, host)
        except TransportError as e:
            raise QueryFailure(host, QueryFailure.SESSION_OPEN, str(e))

        try:
            items = session.execute(query.describe(skip_defaults))
        except TransportError as e:
            raise QueryFailure(host, QueryFailure.QUERY, str(e))
        finally:
            self._close_session(session, host)

        records = query.build_records(host, items, skip_defaults)
        self.logger.info(f"[{host}] {len(records)} élément(s) collecté(s) sur {len(items)}")
        return records

    def _close_session(self, session, host: str):
        """
        Ferme la session sans jamais propager d'erreur

        Args:
            session: Session ouverte
            host: Nom court de l'hôte
        """
        try:
            session.close()
        except Exception as e:
            self.logger.warning(str(CleanupWarning(host, str(e))))
