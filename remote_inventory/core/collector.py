"""
Module collecteur principal pour l'inventaire distant

Ce module orchestre la collecte sur une liste d'hôtes :
- Validation de la requête (source des hôtes)
- Résolution puis interrogation de chaque hôte
- Tolérance aux échecs partiels (un hôte en échec est ignoré)
- Assemblage du résultat dans l'ordre de la liste des hôtes
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from .errors import ConfigurationError, InventoryError, QueryFailure, ResolutionFailure
from .executor import RemoteQueryExecutor
from .models import CollectionRequest, CollectionResult, InventoryRecord
from .resolver import HostResolver

# Résultat d'un hôte : ses enregistrements et l'éventuel échec
HostOutcome = Tuple[List[InventoryRecord], Optional[InventoryError]]


def read_host_file(path: str) -> List[str]:
    """
    Lit un fichier contenant un nom d'hôte par ligne

    Args:
        path: Chemin du fichier

    Returns:
        list: Noms d'hôtes, lignes vides ignorées
    """
    try:
        with open(path, 'r', encoding='utf-8-sig') as f:
            return [line.strip() for line in f if line.strip()]
    except OSError as e:
        raise ConfigurationError(ConfigurationError.UNUSABLE_HOST_SOURCE, f"{path}: {e}")


class InventoryCollector:
    """
    Collecteur principal qui orchestre l'inventaire d'un parc

    Cette classe enchaîne résolution et requête pour chaque hôte et accumule
    les enregistrements. Seule une erreur de configuration interrompt la
    collecte ; les échecs par hôte sont journalisés puis ignorés.
    """

    def __init__(self, config, logger, transport=None):
        """
        Initialise le collecteur principal

        Args:
            config: Instance de InventoryConfig
            logger: Instance de InventoryLogger
            transport: Transport distant (WinRMTransport par défaut)
        """
        self.config = config
        self.logger = logger.get_logger()

        if transport is None:
            from .transport import WinRMTransport
            transport = WinRMTransport(config, logger)

        self.transport = transport
        self.resolver = HostResolver(transport, logger)
        self.executor = RemoteQueryExecutor(transport, logger)

        self.max_workers = max(1, config.get_agent_config()['max_workers'])

    def build_host_list(self, request: CollectionRequest) -> List[str]:
        """
        Valide la requête et construit la liste effective des hôtes

        Args:
            request: Requête de collecte

        Returns:
            list: Hôtes à interroger, dans l'ordre

        Raises:
            ConfigurationError: Liste explicite et fichier fournis ensemble
        """
        if request.host_list and request.host_list_file:
            raise ConfigurationError(
                ConfigurationError.CONFLICTING_HOST_SOURCE,
                "une liste d'hôtes et un fichier d'hôtes ne peuvent pas être fournis ensemble"
            )

        if request.host_list:
            return list(request.host_list)

        if request.host_list_file:
            return read_host_file(request.host_list_file)

        return []

    def run(self, request: CollectionRequest) -> CollectionResult:
        """
        Lance la collecte sur tous les hôtes de la requête

        Args:
            request: Requête de collecte

        Returns:
            CollectionResult: Enregistrements dans l'ordre des hôtes, et échecs
        """
        hosts = self.build_host_list(request)

        start_time = time.time()
        result = CollectionResult(kind=request.kind, hosts_total=len(hosts))

        if not hosts:
            self.logger.warning("Aucun hôte à interroger")
            return result

        self.logger.info(f"=== Début de collecte '{request.kind.value}' sur {len(hosts)} hôte(s) ===")

        if self.max_workers > 1 and len(hosts) > 1:
            outcomes = self._run_parallel(hosts, request)
        else:
            outcomes = [self._collect_host(host, request) for host in hosts]

        # Assemblage dans l'ordre de la liste des hôtes
        for records, failure in outcomes:
            result.records.extend(records)
            if failure is not None:
                result.failures.append(failure)

        result.duration_seconds = round(time.time() - start_time, 2)

        self.logger.info(f"Collecte terminée en {result.duration_seconds:.2f} secondes")
        self.logger.info(f"Collecté: {len(result.records)} élément(s), "
                         f"{len(hosts) - len(result.failures)}/{len(hosts)} hôte(s) en succès")
        self.logger.info(f"{len(result.hosts_with_records())} hôte(s) avec au moins un élément")
        if result.failures:
            self.logger.warning(f"{len(result.failures)} hôte(s) ignoré(s): "
                                f"{', '.join(f.host for f in result.failures)}")

        return result

    def _run_parallel(self, hosts: List[str], request: CollectionRequest) -> List[HostOutcome]:
        """
        Interroge les hôtes en parallèle

        map() restitue les résultats dans l'ordre de soumission : le résultat
        est identique à celui de la collecte séquentielle.
        """
        workers = min(self.max_workers, len(hosts))
        self.logger.debug(f"Collecte parallèle avec {workers} worker(s)")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="inventory") as pool:
            return list(pool.map(lambda host: self._collect_host(host, request), hosts))

    def _collect_host(self, host: str, request: CollectionRequest) -> HostOutcome:
        """
        Résout puis interroge un hôte

        Les échecs de résolution ou de requête sont interceptés ici : l'hôte
        ne contribue aucun enregistrement et la collecte continue.

        Args:
            host: Nom saisi par l'utilisateur
            request: Requête de collecte

        Returns:
            tuple: (enregistrements, échec éventuel)
        """
        try:
            resolved = self.resolver.resolve(host)
        except InventoryError as e:
            self.logger.warning(f"Hôte ignoré - résolution échouée: {e}")
            return [], e
        except Exception as e:
            failure = ResolutionFailure(host, ResolutionFailure.IDENTITY_QUERY_FAILED, f"erreur inattendue: {e}")
            self.logger.error(f"Hôte ignoré - résolution échouée: {failure}", exc_info=True)
            return [], failure

        try:
            records = self.executor.collect(resolved, request.kind, request.skip_defaults)
        except InventoryError as e:
            self.logger.error(f"Hôte ignoré - requête échouée: {e}")
            return [], e
        except Exception as e:
            failure = QueryFailure(host, QueryFailure.QUERY, f"erreur inattendue: {e}")
            self.logger.error(f"Hôte ignoré - requête échouée: {failure}", exc_info=True)
            return [], failure

        return records, None
