"""
Module Core - Composants principaux du collecteur d'inventaire distant

Ce module contient les fonctionnalités de base :
- Configuration et logging
- Modèle de données et erreurs
- Transport WinRM
- Résolution des hôtes, exécution des requêtes et orchestration
- Export des rapports
"""
