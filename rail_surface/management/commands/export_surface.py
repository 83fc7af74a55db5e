from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from graphql import GraphQLError

from rail_surface.core.exceptions import SurfaceError
from rail_surface.core.surface import synthesize_surface


class Command(BaseCommand):
    help = "Export the authorized GraphQL surface as SDL (Schema Definition Language)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--schema",
            dest="schema_file",
            help="Base schema SDL file (default: built from RAIL_SURFACE database_objects).",
        )
        parser.add_argument(
            "--out",
            dest="output_file",
            help="Output file path (default: stdout).",
        )

    def handle(self, *args, **options):
        base_schema = None
        if options.get("schema_file"):
            schema_path = Path(options["schema_file"])
            if not schema_path.exists():
                raise CommandError(f"Base schema file not found: {schema_path}")
            base_schema = schema_path.read_text(encoding="utf-8")

        try:
            result = synthesize_surface(base_schema)
        except SurfaceError as exc:
            raise CommandError(f"{exc.sub_status_code.value}: {exc}") from exc
        except GraphQLError as exc:
            raise CommandError(f"Invalid base schema: {exc.message}") from exc

        output = result.print_schema_sdl()
        if options.get("output_file"):
            with open(options["output_file"], "w", encoding="utf-8") as f:
                f.write(output)
            self.stdout.write(self.style.SUCCESS(f"Schema written to {options['output_file']}"))
        else:
            self.stdout.write(output)
