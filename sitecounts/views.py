import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .block import build_block_context, serialize_block
from .exceptions import CatalogUnavailable

logger = logging.getLogger(__name__)


@require_GET
def block_data(request, item_id: int):
    try:
        context = build_block_context(item_id)
    except CatalogUnavailable:
        logger.error("Site counts block: catalog unavailable", exc_info=True)
        return JsonResponse({"error": "catalog_unavailable"}, status=503)
    return JsonResponse(serialize_block(context))
