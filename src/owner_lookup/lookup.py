import logging
from typing import Protocol

from pydantic import ValidationError

from owner_lookup.address import DEFAULT_NORMALIZER, AddressNormalizer
from owner_lookup.models import LookupRequest, OwnerLookupResult

logger = logging.getLogger(__name__)


class SearchBackend(Protocol):
    """Submits a normalized address to the county site and scrapes the parcel page.

    Navigation timeouts, retries and browser resources are the backend's job.
    """

    def search(self, normalized_address: str) -> OwnerLookupResult: ...


def lookup_owner(
    request: LookupRequest | dict,
    backend: SearchBackend,
    normalizer: AddressNormalizer | None = None,
) -> OwnerLookupResult:
    """Normalize the requested address and hand it to ``backend``.

    Never raises for bad input or backend failures; those come back as
    ``success=False`` results.
    """
    if not isinstance(request, LookupRequest):
        try:
            request = LookupRequest.model_validate(request or {})
        except ValidationError:
            return OwnerLookupResult.failed("address field required")

    normalizer = normalizer or DEFAULT_NORMALIZER
    street = normalizer.normalize(request.address)
    if not street:
        logger.warning("Address %r has no street portion after normalization", request.address)
        return OwnerLookupResult.failed("address has no street portion")

    logger.info("Searching owner records for %s", street)
    try:
        return backend.search(street)
    except Exception as e:
        logger.error(f"Owner lookup failed for {street}: {e}", exc_info=True)
        return OwnerLookupResult.failed(str(e))
