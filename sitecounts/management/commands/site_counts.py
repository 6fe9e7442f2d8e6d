from __future__ import annotations

import json

from django.core.management.base import BaseCommand, CommandError

from sitecounts.block import build_block_context, serialize_block
from sitecounts.exceptions import CatalogUnavailable


class Command(BaseCommand):
    help = "Print published counts per content kind and the cached block listing for an item."

    def add_arguments(self, parser):
        parser.add_argument(
            "--current-id",
            dest="current_id",
            type=int,
            default=0,
            help="Id of the item being rendered (excluded from the listing). Default: 0",
        )
        parser.add_argument(
            "--json",
            dest="as_json",
            action="store_true",
            help="Print the block data as JSON.",
        )

    def handle(self, *args, **options):
        current_id = int(options["current_id"] or 0)
        try:
            context = build_block_context(current_id)
        except CatalogUnavailable as e:
            raise CommandError(str(e)) from e

        data = serialize_block(context)
        if options["as_json"]:
            self.stdout.write(json.dumps(data, indent=2))
            return

        for line in data["summary"]:
            self.stdout.write(line)
        ids = data["listing"]["ids"]
        if ids:
            self.stdout.write(self.style.SUCCESS(f"Listing ids: {', '.join(str(i) for i in ids)}"))
        else:
            self.stdout.write(self.style.WARNING("Listing is empty."))
