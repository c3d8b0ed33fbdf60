#!/usr/bin/env python3
"""
Script di gestione del data layer Locapilot.

Uso:
    python manage.py runserver             # Avvia il server di sviluppo
    python manage.py migrate               # Applica le migrazioni pendenti
    python manage.py history               # Versioni applicate e pendenti
    python manage.py schema                # Chiavi e indici delle tabelle
    python manage.py export <file>         # Esporta i dati in un file JSON
    python manage.py import <file>         # Sostituisce i dati con quelli del file
    python manage.py clear                 # Svuota le tabelle di business
    python manage.py refresh-overdue       # Segna 'late' le scadenze scadute
    python manage.py reset                 # Ricrea lo store (solo sviluppo)
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from locapilot import create_app
from locapilot.errors import LocapilotError
from locapilot.extensions import db
from config import DevConfig, ProdConfig

# ---------------------------------------------------------------------
# Logger CLI (fuori dal contesto Flask)
# ---------------------------------------------------------------------
cli_logger = logging.getLogger("manage_cli")
cli_logger.setLevel(logging.INFO)

if not cli_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(levelname)s: %(name)s: %(message)s")
    )
    cli_logger.addHandler(handler)


# ---------------------------------------------------------------------
# Comandi
# ---------------------------------------------------------------------
def _manager():
    from locapilot.schema import MigrationManager

    return MigrationManager(db.engine)


def migrate(app) -> None:
    with app.app_context():
        applied = _manager().apply_migrations()
        if applied:
            cli_logger.info("Migrazioni applicate: %s", ", ".join(map(str, applied)))
        else:
            cli_logger.info("Nessuna migrazione pendente.")


def history(app) -> None:
    with app.app_context():
        print(json.dumps(_manager().history(), indent=2, ensure_ascii=False))


def schema(app) -> None:
    with app.app_context():
        print(json.dumps(_manager().export_schema(), indent=2, ensure_ascii=False))


def export_data(app, file_path: str) -> None:
    from locapilot.services import export_json

    with app.app_context():
        target = Path(file_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(export_json(), encoding="utf-8")
        cli_logger.info("Export scritto in %s", target)


def import_data(app, file_path: str) -> None:
    from locapilot.services import import_snapshot

    with app.app_context():
        counts = import_snapshot(Path(file_path).read_text(encoding="utf-8"))
        cli_logger.info("Import completato: %s", counts)


def clear_data(app) -> None:
    from locapilot.services import clear_all

    with app.app_context():
        deleted = clear_all()
        cli_logger.info("Righe cancellate: %s", deleted)


def refresh_overdue(app) -> None:
    from locapilot.services import refresh_overdue_rents

    with app.app_context():
        updated = refresh_overdue_rents()
        cli_logger.info("Scadenze segnate in ritardo: %d", len(updated))


def reset(app) -> None:
    if app.config.get("ENV") == "production":
        cli_logger.error("Reset non consentito in produzione.")
        sys.exit(1)
    with app.app_context():
        applied = _manager().reset_database()
        cli_logger.info("Store ricreato, versioni applicate: %s", applied)


def run_server(app) -> None:
    """Avvia il server di sviluppo Flask."""
    host = os.environ.get("FLASK_RUN_HOST", "127.0.0.1")
    port = int(os.environ.get("FLASK_RUN_PORT", "5000"))
    debug = app.config.get("DEBUG", False)

    app.logger.info("Avvio del server su http://%s:%s", host, port)
    app.run(host=host, port=port, debug=debug)


# ---------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------
def main() -> None:
    parser = argparse.ArgumentParser(
        description="Gestione del data layer Locapilot."
    )
    parser.add_argument(
        "command",
        choices=[
            "runserver",
            "migrate",
            "history",
            "schema",
            "export",
            "import",
            "clear",
            "refresh-overdue",
            "reset",
        ],
        help="Comando da eseguire.",
    )
    parser.add_argument("file", nargs="?", help="File JSON per export/import.")
    parser.add_argument(
        "--prod",
        action="store_true",
        help="Usa la configurazione di produzione.",
    )

    args = parser.parse_args()
    if args.command in ("export", "import") and not args.file:
        parser.error(f"il comando {args.command} richiede il percorso del file")

    app = create_app(ProdConfig if args.prod else DevConfig)

    try:
        if args.command == "runserver":
            run_server(app)
        elif args.command == "migrate":
            migrate(app)
        elif args.command == "history":
            history(app)
        elif args.command == "schema":
            schema(app)
        elif args.command == "export":
            export_data(app, args.file)
        elif args.command == "import":
            import_data(app, args.file)
        elif args.command == "clear":
            clear_data(app)
        elif args.command == "refresh-overdue":
            refresh_overdue(app)
        elif args.command == "reset":
            reset(app)
    except LocapilotError as exc:
        cli_logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
