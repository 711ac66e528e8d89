"""
Transport distant pour le collecteur d'inventaire

Ce module isole tous les accès réseau :
- Sonde de disponibilité (ping système)
- Requête d'identité (Win32_ComputerSystem) via WinRM
- Ouverture / fermeture de sessions WinRM (shell distant)
- Exécution d'une énumération en lecture seule et décodage JSON

Les scripts PowerShell exécutés à distance forment une liste fixe indexée par
type d'inventaire : seul un QueryDescriptor (données) traverse la frontière.
"""

import base64
import json
import math
import subprocess
import sys
import xml.etree.ElementTree as ET
from typing import Dict, Any, List, Tuple

import requests
from winrm.exceptions import WinRMError, WinRMOperationTimeoutError, WinRMTransportError
from winrm.protocol import Protocol

from .errors import TransportError
from .models import CollectionKind, QueryDescriptor


# Exceptions du transport converties en TransportError
TRANSPORT_EXCEPTIONS = (
    WinRMError,
    WinRMTransportError,
    WinRMOperationTimeoutError,
    requests.exceptions.RequestException,
    ET.ParseError,
)

_UTF8_PREAMBLE = "[Console]::OutputEncoding = New-Object System.Text.UTF8Encoding $false; "

IDENTITY_SCRIPT = _UTF8_PREAMBLE + (
    "Get-CimInstance -ClassName Win32_ComputerSystem | "
    "Select-Object -Property Name, Domain | ConvertTo-Json -Compress"
)

ENUMERATION_SCRIPTS = {
    CollectionKind.SERVICES: _UTF8_PREAMBLE + (
        "$items = Get-CimInstance -ClassName Win32_Service | "
        "Select-Object -Property Name, State, StartName, Description; "
        "ConvertTo-Json -InputObject @($items) -Compress"
    ),
    CollectionKind.SCHEDULED_TASKS: _UTF8_PREAMBLE + (
        "$items = Get-ScheduledTask | ForEach-Object { [pscustomobject]@{ "
        "TaskName = $_.TaskName; TaskPath = $_.TaskPath; State = [string]$_.State; "
        "RunAs = $_.Principal.UserId; Description = $_.Description; Author = $_.Author } }; "
        "ConvertTo-Json -InputObject @($items) -Compress"
    ),
}


def encode_powershell(script: str) -> str:
    """
    Encode un script pour l'option -EncodedCommand de PowerShell

    Args:
        script: Script PowerShell

    Returns:
        str: Script encodé en base64 (UTF-16LE)
    """
    return base64.b64encode(script.encode('utf_16_le')).decode('ascii')


def parse_json_items(output: bytes) -> List[Dict[str, Any]]:
    """
    Décode la sortie JSON d'une énumération distante

    ConvertTo-Json produit un objet seul pour un élément unique et rien du tout
    pour une énumération vide ; les deux cas sont ramenés à une liste.

    Args:
        output: Sortie standard brute du shell distant

    Returns:
        list: Éléments décodés
    """
    text = output.decode('utf-8-sig', errors='replace').strip() if output else ''
    if not text:
        return []

    try:
        data = json.loads(text)
    except ValueError as e:
        raise TransportError(f"Réponse JSON invalide: {e}")

    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    raise TransportError(f"Réponse inattendue de type {type(data).__name__}")


class RemoteSession:
    """
    Session WinRM ouverte sur un hôte (un shell distant)

    La session porte le nom court de l'hôte pour la corrélation des logs.
    """

    def __init__(self, protocol: Protocol, endpoint: str, name: str, logger):
        """
        Args:
            protocol: Protocole pywinrm configuré
            endpoint: URL WinRM de l'hôte
            name: Nom court de l'hôte
            logger: Logger standard
        """
        self.protocol = protocol
        self.endpoint = endpoint
        self.name = name
        self.logger = logger
        self.shell_id = None

    def open(self) -> 'RemoteSession':
        """Ouvre le shell distant"""
        try:
            self.shell_id = self.protocol.open_shell()
        except TRANSPORT_EXCEPTIONS as e:
            raise TransportError(f"Ouverture de session impossible sur {self.endpoint}: {e}")
        self.logger.debug(f"[{self.name}] Session ouverte ({self.shell_id})")
        return self

    def execute(self, descriptor: QueryDescriptor) -> List[Dict[str, Any]]:
        """
        Exécute l'énumération décrite par le descripteur

        Args:
            descriptor: Type d'inventaire et paramètres de filtrage

        Returns:
            list: Éléments bruts retournés par l'hôte
        """
        script = ENUMERATION_SCRIPTS.get(descriptor.kind)
        if script is None:
            raise TransportError(f"Aucune énumération pour le type {descriptor.kind}")
        return self.run_script(script)

    def run_script(self, script: str) -> List[Dict[str, Any]]:
        """
        Exécute un script PowerShell dans le shell et décode sa sortie JSON

        Args:
            script: Script PowerShell (liste fixe du module)

        Returns:
            list: Éléments décodés
        """
        if self.shell_id is None:
            raise TransportError(f"Session {self.name} non ouverte")

        try:
            command_id = self.protocol.run_command(
                self.shell_id,
                'powershell',
                ['-NoProfile', '-NonInteractive', '-EncodedCommand', encode_powershell(script)]
            )
            try:
                std_out, std_err, status_code = self.protocol.get_command_output(self.shell_id, command_id)
            finally:
                self.protocol.cleanup_command(self.shell_id, command_id)
        except TRANSPORT_EXCEPTIONS as e:
            raise TransportError(f"Exécution distante échouée sur {self.endpoint}: {e}")

        if status_code != 0:
            detail = std_err.decode('utf-8', errors='replace').strip() if std_err else ''
            raise TransportError(f"Code de sortie {status_code}: {detail}")

        return parse_json_items(std_out)

    def close(self):
        """Ferme le shell distant"""
        if self.shell_id is None:
            return
        try:
            self.protocol.close_shell(self.shell_id)
        except TRANSPORT_EXCEPTIONS as e:
            raise TransportError(f"Fermeture de session échouée sur {self.endpoint}: {e}")
        finally:
            self.shell_id = None
        self.logger.debug(f"[{self.name}] Session fermée")


class WinRMTransport:
    """
    Transport WinRM du collecteur

    Fournit les quatre primitives utilisées par la résolution et l'exécution :
    sonde, identité, ouverture de session et énumération dans la session.
    L'authentification utilise l'identité courante de l'appelant (Kerberos).
    """

    def __init__(self, config, logger):
        """
        Args:
            config: Instance de InventoryConfig
            logger: Instance de InventoryLogger
        """
        self.config = config
        self.logger = logger.get_logger()

        self.remote_config = config.get_remote_config()
        self.probe_timeout = config.get_probe_config()['timeout']

    def endpoint_for(self, host: str) -> str:
        """URL WinRM pour un hôte"""
        return f"{self.remote_config['scheme']}://{host}:{self.remote_config['port']}/wsman"

    def _build_ping_command(self, host: str) -> List[str]:
        """
        Construit la commande ping (un seul paquet) selon la plateforme

        Args:
            host: Hôte à sonder

        Returns:
            list: Arguments de la commande
        """
        if sys.platform == "win32":
            return ['ping', '-n', '1', '-w', str(int(self.probe_timeout * 1000)), host]
        elif sys.platform == "darwin":
            return ['ping', '-c', '1', '-t', str(max(1, math.ceil(self.probe_timeout))), host]
        else:
            return ['ping', '-c', '1', '-W', str(max(1, math.ceil(self.probe_timeout))), host]

    def probe(self, host: str) -> bool:
        """
        Vérifie qu'un hôte répond (un seul ping, timeout court)

        Args:
            host: Hôte à sonder

        Returns:
            bool: True si l'hôte répond
        """
        command = self._build_ping_command(host)
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.probe_timeout + 5
            )
        except subprocess.TimeoutExpired:
            self.logger.debug(f"[{host}] Timeout de la sonde")
            return False
        except OSError as e:
            self.logger.warning(f"Commande ping indisponible: {e}")
            return False

        return result.returncode == 0

    def _build_protocol(self, host: str) -> Protocol:
        """Construit le protocole pywinrm pour un hôte"""
        return Protocol(
            endpoint=self.endpoint_for(host),
            transport=self.remote_config['transport'],
            server_cert_validation=self.remote_config['server_cert_validation'],
            operation_timeout_sec=self.remote_config['operation_timeout'],
            read_timeout_sec=self.remote_config['read_timeout']
        )

    def open_session(self, host: str, name: str) -> RemoteSession:
        """
        Ouvre une session WinRM sur un hôte

        Args:
            host: Cible de connexion (FQDN)
            name: Nom court utilisé pour étiqueter la session

        Returns:
            RemoteSession: Session ouverte
        """
        try:
            protocol = self._build_protocol(host)
        except TRANSPORT_EXCEPTIONS as e:
            raise TransportError(f"Transport WinRM inutilisable pour {host}: {e}")
        return RemoteSession(protocol, self.endpoint_for(host), name, self.logger).open()

    def query_identity(self, host: str) -> Tuple[str, str]:
        """
        Récupère le nom et le domaine de l'hôte (Win32_ComputerSystem)

        Args:
            host: Nom saisi par l'utilisateur

        Returns:
            tuple: (nom, domaine)
        """
        session = self.open_session(host, host)
        try:
            items = session.run_script(IDENTITY_SCRIPT)
        finally:
            try:
                session.close()
            except TransportError as e:
                self.logger.warning(f"[{host}] {e}")

        if not items or not items[0].get('Name'):
            raise TransportError("Win32_ComputerSystem n'a retourné aucun nom")

        return str(items[0]['Name']), str(items[0].get('Domain') or '')
