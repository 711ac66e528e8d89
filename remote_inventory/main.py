"""
Point d'entrée principal du collecteur d'inventaire distant

Ce module enchaîne les étapes d'une collecte :
- Lecture de la configuration et des arguments
- Collecte (services ou tâches planifiées) sur la liste des hôtes
- Export CSV ou affichage dans la vue interactive
"""

import argparse
import sys

from remote_inventory.core.collector import InventoryCollector
from remote_inventory.core.config import InventoryConfig, create_default_config
from remote_inventory.core.errors import ConfigurationError
from remote_inventory.core.logger import InventoryLogger
from remote_inventory.core.models import CollectionKind, CollectionRequest, CollectionResult
from remote_inventory.core.report import CsvReportWriter


class WatchmanRemoteInventory:
    """
    Collecteur d'inventaire distant principal

    Cette classe assemble configuration, logging, collecteur et rapports.
    """

    def __init__(self, config_path=None, transport=None):
        """
        Initialise le collecteur

        Args:
            config_path: Chemin vers le fichier de configuration
            transport: Transport distant (WinRM par défaut)
        """
        self.config = InventoryConfig(config_path)

        self.logger = InventoryLogger(self.config)
        self.app_logger = self.logger.get_logger()
        self.logger.log_config_info(self.config)

        self.collector = InventoryCollector(self.config, self.logger, transport=transport)

    def collect(self, request: CollectionRequest) -> CollectionResult:
        """
        Effectue une collecte

        Args:
            request: Requête de collecte

        Returns:
            CollectionResult: Résultat de la collecte
        """
        return self.collector.run(request)

    def save_report(self, result: CollectionResult, output_dir=None) -> str:
        """
        Écrit le résultat dans un fichier CSV daté

        Returns:
            str: Chemin du fichier écrit
        """
        writer = CsvReportWriter(self.config, self.logger)
        return writer.write(result, output_dir=output_dir)

    def show_report(self, result: CollectionResult):
        """
        Affiche le résultat dans la vue interactive (bloquant)
        """
        from remote_inventory.web.app import InventoryViewerApp

        viewer = InventoryViewerApp(result, self.config, self.logger)
        viewer.run()


def build_parser() -> argparse.ArgumentParser:
    """
    Construit le parseur des arguments de ligne de commande

    Returns:
        argparse.ArgumentParser: Parseur configuré
    """
    parser = argparse.ArgumentParser(
        description='Inventaire distant - Services et tâches planifiées d\'un parc Windows'
    )

    parser.add_argument(
        '--computers', '-C',
        nargs='+',
        metavar='NOM',
        help='Hôtes à interroger'
    )

    parser.add_argument(
        '--file', '-f',
        type=str,
        help='Fichier contenant un hôte par ligne'
    )

    parser.add_argument(
        '--kind', '-k',
        choices=[kind.value for kind in CollectionKind],
        default=CollectionKind.SERVICES.value,
        help='Type d\'inventaire à collecter'
    )

    parser.add_argument(
        '--save-to-file', '-s',
        action='store_true',
        help='Écrit le rapport dans un fichier CSV au lieu de la vue interactive'
    )

    parser.add_argument(
        '--skip-defaults', '-d',
        action='store_true',
        help='Exclut les services sous compte système et les tâches de l\'éditeur'
    )

    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        help='Dossier de sortie du rapport CSV'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Chemin vers le fichier de configuration'
    )

    parser.add_argument(
        '--create-config',
        action='store_true',
        help='Crée un fichier de configuration par défaut'
    )

    parser.add_argument(
        '--validate-config',
        action='store_true',
        help='Valide la configuration actuelle'
    )

    return parser


def main(argv=None, transport=None):
    """
    Point d'entrée principal avec gestion des arguments de ligne de commande

    Args:
        argv: Arguments (sys.argv par défaut)
        transport: Transport distant (WinRM par défaut)

    Returns:
        int: Code de sortie (1 uniquement pour une configuration invalide)
    """
    args = build_parser().parse_args(argv)

    if args.create_config:
        if not args.config:
            print("❌ --create-config nécessite --config", file=sys.stderr)
            return 1
        try:
            create_default_config(args.config)
        except OSError as e:
            print(f"❌ Erreur création configuration: {e}", file=sys.stderr)
            return 1
        print(f"✅ Configuration par défaut créée: {args.config}")
        return 0

    inventory = WatchmanRemoteInventory(args.config, transport=transport)

    if args.validate_config:
        if inventory.config.validate():
            print("✅ Configuration valide")
            return 0
        print("❌ Configuration invalide")
        return 1

    request = CollectionRequest(
        host_list=args.computers,
        host_list_file=args.file,
        skip_defaults=args.skip_defaults,
        kind=CollectionKind.from_value(args.kind)
    )

    try:
        result = inventory.collect(request)
    except ConfigurationError as e:
        inventory.app_logger.error(f"Erreur de configuration: {e}")
        return 1

    try:
        if args.save_to_file:
            path = inventory.save_report(result, output_dir=args.output_dir)
            print(f"✅ Rapport sauvegardé dans: {path}")
        else:
            inventory.show_report(result)
    except KeyboardInterrupt:
        print("\n🛑 Arrêt demandé par l'utilisateur")
    except OSError as e:
        inventory.app_logger.error(f"Erreur d'écriture du rapport: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
