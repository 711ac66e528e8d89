"""
Module Web - Vue interactive des résultats d'inventaire

Fournit une interface web locale (Flask) affichant le rapport sous forme de tableau.
"""
