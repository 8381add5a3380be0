from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from festcore.apps.communities.models import Community
from festcore.apps.core.errors import ApiError
from festcore.apps.registration.services.bulk_upload import process_upload, read_rows


class Command(BaseCommand):
    help = "Importa participantes desde un .csv/.xlsx (mismo formato que la carga masiva) y deja un reporte CSV."

    def add_arguments(self, parser):
        parser.add_argument("path", type=str, help="Ruta al archivo .csv o .xlsx")
        parser.add_argument("--community", type=str, default=None,
                            help="Nombre de la comunidad destino (por defecto: columna 'community' de cada fila)")
        parser.add_argument("--dry-run", action="store_true", help="Valida y simula sin escribir cambios")

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.exists():
            raise CommandError(f"Archivo no encontrado: {path}")

        community = None
        if options.get("community"):
            community = Community.objects.filter(name__iexact=options["community"]).first()
            if community is None:
                raise CommandError(f"Comunidad '{options['community']}' no existe.")

        dry_run = options.get("dry_run", False)
        try:
            records = read_rows(path.name, path.read_bytes())
            with transaction.atomic():
                result = process_upload(records, community)
                if dry_run:
                    transaction.set_rollback(True)
        except ApiError as exc:
            raise CommandError(exc.message)

        self.stdout.write(self.style.SUCCESS(f"Filas procesadas: {len(records)}"))
        self.stdout.write(self.style.SUCCESS(
            f"OK: {len(result.success)}  ·  OMITIDAS: {len(result.skipped)}  ·  ERRORES: {len(result.errors)}"
        ))

        if dry_run:
            self.stdout.write(self.style.WARNING("Dry-run: no se crearon usuarios ni participantes."))
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = Path.cwd() / f"import_report_{timestamp}.csv"
        with report_path.open("w", newline="", encoding="utf-8") as fp:
            writer = csv.writer(fp)
            writer.writerow(["row", "status", "email", "detail"])
            for item in result.success:
                writer.writerow([item["row"], "OK", item["email"], item["username"]])
            for item in result.skipped:
                writer.writerow([item["row"], "SKIPPED", item["email"], item["reason"]])
            for item in result.errors:
                writer.writerow([item["row"], "ERROR", item["email"], "; ".join(item["errors"])])
        self.stdout.write(self.style.SUCCESS(f"Reporte: {report_path}"))
