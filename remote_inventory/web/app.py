"""
Application Flask pour la vue interactive des résultats d'inventaire

Cette application affiche un CollectionResult sous forme de tableau filtrable,
en local, jusqu'à l'interruption du processus (Ctrl+C).
"""

import logging
from datetime import datetime
from typing import Dict, Any, List

from flask import Flask, render_template_string, request, jsonify

from ..core.models import CollectionResult


PAGE_TEMPLATE = """<!doctype html>
<html lang="fr">
<head>
  <meta charset="utf-8">
  <title>Watchman - {{ title }}</title>
  <style>
    body { font-family: Segoe UI, Arial, sans-serif; margin: 1.5em; }
    table { border-collapse: collapse; width: 100%; }
    th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; font-size: 0.9em; }
    th { background: #f0f0f0; }
    tr:nth-child(even) { background: #fafafa; }
    .meta { color: #666; margin-bottom: 1em; }
  </style>
</head>
<body>
  <h1>{{ title }}</h1>
  <div class="meta">
    {{ rows|length }} / {{ total }} élément(s) - {{ hosts_total }} hôte(s) interrogé(s),
    {{ failures|length }} ignoré(s) - capturé le {{ captured_at }}
  </div>
  <form method="get">
    <input type="text" name="q" value="{{ query }}" placeholder="Filtrer...">
    <button type="submit">Filtrer</button>
  </form>
  <table>
    <thead>
      <tr>{% for column in columns %}<th>{{ column }}</th>{% endfor %}</tr>
    </thead>
    <tbody>
      {% for row in rows %}
      <tr>{% for column in columns %}<td>{{ row[column] if row[column] is not none else '' }}</td>{% endfor %}</tr>
      {% endfor %}
    </tbody>
  </table>
</body>
</html>
"""


class InventoryViewerApp:
    """
    Application web Flask affichant un résultat de collecte

    Cette classe encapsule l'application Flask et fournit les routes
    nécessaires à la consultation du rapport en mémoire.
    """

    def __init__(self, result: CollectionResult, config, logger):
        """
        Initialise l'application web

        Args:
            result: Résultat de collecte à afficher
            config: Instance de InventoryConfig
            logger: Instance de InventoryLogger
        """
        self.result = result
        self.config = config
        self.app_logger = logger.get_logger()
        self.captured_at = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

        self.app = Flask(__name__)

        # Désactiver les logs Flask pour éviter la pollution
        logging.getLogger('werkzeug').setLevel(logging.ERROR)

        self._register_routes()

    def _filter_rows(self, query: str) -> List[Dict[str, Any]]:
        """
        Filtre les lignes contenant le texte recherché (insensible à la casse)

        Args:
            query: Texte recherché

        Returns:
            list: Lignes correspondantes
        """
        rows = self.result.as_rows()
        if not query:
            return rows

        needle = query.lower()
        return [
            row for row in rows
            if any(value is not None and needle in str(value).lower() for value in row.values())
        ]

    def _register_routes(self):
        """Enregistre toutes les routes Flask"""

        @self.app.route('/')
        def index():
            """Tableau des enregistrements"""
            query = request.args.get('q', '').strip()
            return render_template_string(
                PAGE_TEMPLATE,
                title=f"Inventaire {self.result.kind.value}",
                columns=self.result.field_names,
                rows=self._filter_rows(query),
                total=len(self.result),
                hosts_total=self.result.hosts_total,
                failures=self.result.failures,
                captured_at=self.captured_at,
                query=query
            )

        @self.app.route('/api/records')
        def api_records():
            """Enregistrements au format JSON"""
            query = request.args.get('q', '').strip()
            return jsonify({
                'kind': self.result.kind.value,
                'columns': self.result.field_names,
                'records': self._filter_rows(query)
            })

        @self.app.route('/api/failures')
        def api_failures():
            """Hôtes ignorés pendant la collecte"""
            return jsonify([
                {'host': failure.host, 'error': str(failure)}
                for failure in self.result.failures
            ])

    def run(self, host: str = None, port: int = None):
        """
        Lance l'application Flask (bloquant)

        Args:
            host: Adresse d'écoute (configuration par défaut)
            port: Port d'écoute (configuration par défaut)
        """
        viewer_config = self.config.get_viewer_config()
        host = host or viewer_config['host']
        port = port or viewer_config['port']

        self.app_logger.info(f"Vue interactive disponible sur http://{host}:{port} (Ctrl+C pour quitter)")

        self.app.run(
            host=host,
            port=port,
            debug=False,
            use_reloader=False
        )
