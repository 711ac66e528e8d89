"""
Watchman Remote Inventory - Collecte d'inventaire sur un parc de machines distantes

Ce module principal fournit un collecteur qui interroge une liste de machines
Windows via WinRM (services installés ou tâches planifiées), normalise les
résultats en enregistrements plats et les exporte en CSV ou dans une vue web.

Author: Watchman Agent Client Team
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Watchman Agent Client Team"

# Imports principaux pour faciliter l'utilisation
from .core.collector import InventoryCollector
from .core.config import InventoryConfig
from .core.logger import InventoryLogger

__all__ = ['InventoryCollector', 'InventoryConfig', 'InventoryLogger']
