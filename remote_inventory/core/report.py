"""
Export des rapports d'inventaire

Écrit un CollectionResult dans un fichier CSV :
- Une ligne par enregistrement
- En-tête = noms des champs dans l'ordre de déclaration
- Nom de fichier incluant la date de capture
"""

import csv
import os
from datetime import date
from typing import Optional

from .models import CollectionKind, CollectionResult


def report_file_name(prefix: str, kind: CollectionKind, capture_date: Optional[date] = None) -> str:
    """
    Construit le nom du fichier de rapport

    Args:
        prefix: Préfixe configuré
        kind: Type d'inventaire
        capture_date: Date de capture (aujourd'hui par défaut)

    Returns:
        str: Nom du fichier, ex. inventory_services_2024-01-31.csv
    """
    capture_date = capture_date or date.today()
    return f"{prefix}_{kind.value}_{capture_date.isoformat()}.csv"


class CsvReportWriter:
    """Écrit les résultats de collecte au format CSV"""

    def __init__(self, config, logger):
        """
        Args:
            config: Instance de InventoryConfig
            logger: Instance de InventoryLogger
        """
        self.logger = logger.get_logger()

        report_config = config.get_report_config()
        self.output_dir = report_config['output_dir']
        self.delimiter = report_config['delimiter']
        self.file_prefix = report_config['file_prefix']

    def write(self, result: CollectionResult, output_dir: Optional[str] = None,
              capture_date: Optional[date] = None) -> str:
        """
        Écrit le rapport CSV

        Args:
            result: Résultat de collecte
            output_dir: Dossier de sortie (configuration par défaut)
            capture_date: Date de capture (aujourd'hui par défaut)

        Returns:
            str: Chemin du fichier écrit
        """
        output_dir = output_dir or self.output_dir
        if output_dir and not os.path.exists(output_dir):
            os.makedirs(output_dir, exist_ok=True)

        path = os.path.join(output_dir, report_file_name(self.file_prefix, result.kind, capture_date))

        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=result.field_names, delimiter=self.delimiter)
            writer.writeheader()
            writer.writerows(result.as_rows())

        self.logger.info(f"Rapport écrit: {path} ({len(result)} ligne(s))")
        return path
