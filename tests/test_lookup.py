from owner_lookup.address import AddressNormalizer
from owner_lookup.lookup import lookup_owner
from owner_lookup.models import LookupRequest, OwnerLookupResult


class FakeBackend:
    def __init__(self, result=None, error=None):
        self.result = result or OwnerLookupResult.found("DOE JANE", "PO BOX 1 ATLANTA GA 30301")
        self.error = error
        self.searched = []

    def search(self, normalized_address):
        self.searched.append(normalized_address)
        if self.error:
            raise self.error
        return self.result


def test_backend_receives_normalized_address():
    backend = FakeBackend()

    result = lookup_owner(LookupRequest(address="123 Main Street, Atlanta, GA 30303"), backend)

    assert backend.searched == ["123 MAIN ST"]
    assert result.success is True
    assert result.owner_name == "DOE JANE"


def test_dict_request_is_accepted():
    backend = FakeBackend()
    result = lookup_owner({"address": "789 north avenue"}, backend)
    assert result.success is True
    assert backend.searched == ["789 N AVE"]


def test_missing_address_is_rejected_without_search():
    backend = FakeBackend()

    for request in ({}, {"address": ""}, None):
        result = lookup_owner(request, backend)
        assert result.success is False
        assert result.error == "address field required"

    assert backend.searched == []


def test_address_without_street_portion_is_rejected():
    backend = FakeBackend()
    result = lookup_owner({"address": "Atlanta, GA 30303"}, backend)
    assert result.success is False
    assert result.error == "address has no street portion"
    assert backend.searched == []


def test_backend_failure_becomes_result():
    backend = FakeBackend(error=TimeoutError("Navigation timeout of 30000 ms exceeded"))

    result = lookup_owner({"address": "100 Peachtree St"}, backend)

    assert result.success is False
    assert result.error == "Navigation timeout of 30000 ms exceeded"


def test_custom_normalizer_is_used():
    backend = FakeBackend()
    normalizer = AddressNormalizer(abbreviations={}, city_tokens=[])
    lookup_owner({"address": "1 Main Street Atlanta"}, backend, normalizer=normalizer)
    assert backend.searched == ["1 MAIN STREET ATLANTA"]
