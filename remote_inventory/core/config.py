"""
Module de configuration pour le collecteur d'inventaire distant

Ce module gère la configuration du collecteur, incluant :
- Lecture des fichiers de configuration
- Validation des paramètres
- Valeurs par défaut
- Configuration spécifique par plateforme
"""

import os
import sys
import configparser
from typing import Dict, Any, Optional


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_TRANSPORTS = ['kerberos', 'ntlm', 'credssp', 'certificate', 'basic', 'plaintext', 'ssl']
VALID_SCHEMES = ['http', 'https']
VALID_CERT_VALIDATION = ['validate', 'ignore']


class InventoryConfig:
    """
    Gestionnaire de configuration pour le collecteur d'inventaire

    Cette classe centralise la gestion de toute la configuration :
    transport WinRM, sonde réseau, rapports, vue web et logging.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialise la configuration du collecteur

        Args:
            config_file: Chemin vers le fichier de configuration (optionnel)
        """
        self.config = configparser.ConfigParser()
        self.config_file = config_file or self._get_default_config_path()

        # Définir les valeurs par défaut
        self._set_defaults()

        # Charger la configuration depuis le fichier
        self._load_config()

    def _get_default_config_path(self) -> str:
        """
        Détermine le chemin par défaut du fichier de configuration selon la plateforme

        Returns:
            str: Chemin vers le fichier de configuration
        """
        if sys.platform == "win32":
            return os.path.join(
                os.environ.get("PROGRAMDATA", "C:\\ProgramData"),
                "WatchmanRemoteInventory",
                "config.ini"
            )
        else:
            return "/etc/watchman-remote-inventory/config.ini"

    def _set_defaults(self):
        """
        Définit les valeurs de configuration par défaut

        Ces valeurs sont utilisées si aucun fichier de configuration n'est trouvé
        ou si certaines sections/clés sont manquantes.
        """
        # Configuration générale
        self.config.add_section('agent')
        self.config.set('agent', 'log_level', 'INFO')
        self.config.set('agent', 'max_workers', '1')

        # Sonde de disponibilité (ping)
        self.config.add_section('probe')
        self.config.set('probe', 'timeout', '1')

        # Transport WinRM (identité de l'appelant par défaut)
        self.config.add_section('remote')
        self.config.set('remote', 'transport', 'kerberos')
        self.config.set('remote', 'scheme', 'http')
        self.config.set('remote', 'port', '5985')
        self.config.set('remote', 'server_cert_validation', 'validate')
        self.config.set('remote', 'operation_timeout', '20')
        self.config.set('remote', 'read_timeout', '30')

        # Rapports CSV
        self.config.add_section('report')
        self.config.set('report', 'output_dir', '.')
        self.config.set('report', 'delimiter', ',')
        self.config.set('report', 'file_prefix', 'inventory')

        # Vue web interactive
        self.config.add_section('viewer')
        self.config.set('viewer', 'host', '127.0.0.1')
        self.config.set('viewer', 'port', '18744')

        # Configuration logging
        self.config.add_section('logging')
        self.config.set('logging', 'log_file', self._get_default_log_path())
        self.config.set('logging', 'max_log_size', '10485760')  # 10MB
        self.config.set('logging', 'backup_count', '5')

    def _get_default_log_path(self) -> str:
        """
        Détermine le chemin par défaut des logs selon la plateforme

        Returns:
            str: Chemin vers le fichier de log
        """
        if sys.platform == "win32":
            return os.path.join(
                os.environ.get("PROGRAMDATA", "C:\\ProgramData"),
                "WatchmanRemoteInventory",
                "logs",
                "inventory.log"
            )
        else:
            return "/var/log/watchman-remote-inventory/inventory.log"

    def _load_config(self):
        """
        Charge la configuration depuis le fichier

        Si le fichier n'existe pas, utilise les valeurs par défaut.
        En cas d'erreur de lecture, signale l'erreur et continue avec les défauts.
        """
        try:
            if os.path.exists(self.config_file):
                self.config.read(self.config_file, encoding='utf-8')
                print(f"Configuration chargée depuis: {self.config_file}")
        except configparser.Error as e:
            print(f"Erreur lors du chargement de la configuration: {e}")
            print("Utilisation des valeurs par défaut")

    def get(self, section: str, option: str, fallback: Any = None) -> str:
        """
        Récupère une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            fallback: Valeur par défaut si non trouvée

        Returns:
            str: Valeur de configuration
        """
        return self.config.get(section, option, fallback=fallback)

    def getint(self, section: str, option: str, fallback: int = 0) -> int:
        """Récupère une valeur entière de configuration"""
        return self.config.getint(section, option, fallback=fallback)

    def getfloat(self, section: str, option: str, fallback: float = 0.0) -> float:
        """Récupère une valeur décimale de configuration"""
        return self.config.getfloat(section, option, fallback=fallback)

    def set(self, section: str, option: str, value: Any):
        """
        Définit une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            value: Nouvelle valeur
        """
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))

    def save(self):
        """
        Sauvegarde la configuration dans le fichier

        Crée les dossiers parents si nécessaire.
        """
        config_dir = os.path.dirname(self.config_file)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_file, 'w', encoding='utf-8') as f:
            self.config.write(f)

        print(f"Configuration sauvegardée dans: {self.config_file}")

    def get_agent_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration générale

        Returns:
            dict: Niveau de log et parallélisme
        """
        return {
            'log_level': self.get('agent', 'log_level', 'INFO'),
            'max_workers': self.getint('agent', 'max_workers', 1)
        }

    def get_probe_config(self) -> Dict[str, Any]:
        """Récupère la configuration de la sonde de disponibilité"""
        return {
            'timeout': self.getfloat('probe', 'timeout', 1.0)
        }

    def get_remote_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration complète du transport WinRM

        Returns:
            dict: Configuration du transport
        """
        return {
            'transport': self.get('remote', 'transport', 'kerberos'),
            'scheme': self.get('remote', 'scheme', 'http'),
            'port': self.getint('remote', 'port', 5985),
            'server_cert_validation': self.get('remote', 'server_cert_validation', 'validate'),
            'operation_timeout': self.getint('remote', 'operation_timeout', 20),
            'read_timeout': self.getint('remote', 'read_timeout', 30)
        }

    def get_report_config(self) -> Dict[str, Any]:
        """Récupère la configuration des rapports CSV"""
        return {
            'output_dir': self.get('report', 'output_dir', '.'),
            'delimiter': self.get('report', 'delimiter', ','),
            'file_prefix': self.get('report', 'file_prefix', 'inventory')
        }

    def get_viewer_config(self) -> Dict[str, Any]:
        """Récupère la configuration de la vue web"""
        return {
            'host': self.get('viewer', 'host', '127.0.0.1'),
            'port': self.getint('viewer', 'port', 18744)
        }

    def validate(self) -> bool:
        """
        Valide la configuration courante

        Returns:
            bool: True si la configuration est valide, False sinon
        """
        errors = []

        # Valider le niveau de log
        log_level = self.get('agent', 'log_level', '')
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append("Niveau de log invalide")

        try:
            if self.getint('agent', 'max_workers') < 1:
                errors.append("max_workers doit être supérieur ou égal à 1")

            if self.getfloat('probe', 'timeout') <= 0:
                errors.append("Timeout de la sonde invalide")

            remote = self.get_remote_config()
            if remote['transport'] not in VALID_TRANSPORTS:
                errors.append(f"Transport WinRM invalide (doit être: {', '.join(VALID_TRANSPORTS)})")
            if remote['scheme'] not in VALID_SCHEMES:
                errors.append("Schéma WinRM invalide (doit être: http, https)")
            if remote['server_cert_validation'] not in VALID_CERT_VALIDATION:
                errors.append("server_cert_validation invalide (doit être: validate, ignore)")
            if not (1 <= remote['port'] <= 65535):
                errors.append("Port WinRM invalide (doit être entre 1 et 65535)")
            if remote['read_timeout'] <= remote['operation_timeout']:
                errors.append("read_timeout doit être supérieur à operation_timeout")

            viewer_port = self.getint('viewer', 'port')
            if not (1 <= viewer_port <= 65535):
                errors.append("Port de la vue web invalide (doit être entre 1 et 65535)")
        except ValueError as e:
            errors.append(f"Valeur numérique invalide: {e}")

        if len(self.get('report', 'delimiter', '')) != 1:
            errors.append("Le délimiteur CSV doit être un caractère unique")

        if errors:
            for error in errors:
                print(f"Erreur de configuration: {error}")
            return False

        return True


# Fonction utilitaire pour créer une configuration par défaut
def create_default_config(config_path: str) -> InventoryConfig:
    """
    Crée un fichier de configuration par défaut

    Args:
        config_path: Chemin où créer le fichier de configuration

    Returns:
        InventoryConfig: Instance de configuration créée
    """
    config = InventoryConfig(config_path)
    config.save()
    return config
