import base64
import json

import pytest
import responses

from easypost.client import Client
from easypost.errors import APIError
from easypost.models import (
    Address,
    Batch,
    CarrierAccount,
    CreateAddressOptions,
    CustomsInfo,
    CustomsItem,
    Insurance,
    ListOptions,
)
from easypost.objects import Event

BASE = "https://api.easypost.com/v2/"


@pytest.fixture
def mock():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return Client(api_key="placeholder")


def _body(call):
    return json.loads(call.request.body)


def test_create_address_sends_options_and_address(mock, client):
    mock.add(responses.POST, BASE + "addresses", json={"id": "adr_1", "object": "Address", "city": "Burbank"})
    address = Address(street1="4000 Warner Blvd", city="Burbank")
    result = client.create_address(address, CreateAddressOptions(verify=["delivery"]))
    assert result.id == "adr_1"
    assert result.city == "Burbank"
    assert _body(mock.calls[0]) == {
        "verify": ["delivery"],
        "address": {"street1": "4000 Warner Blvd", "city": "Burbank"},
    }
    assert mock.calls[0].request.headers["Content-Type"] == "application/json"


def test_requests_use_basic_auth_and_user_agent(mock):
    mock.add(responses.GET, BASE + "addresses/adr_1", json={"id": "adr_1", "city": "Burbank"})
    custom = Client(api_key="placeholder", user_agent="custom-agent/1.0")
    result = custom.get_address("adr_1")
    assert result.id == "adr_1"
    assert result.city == "Burbank"
    headers = mock.calls[0].request.headers
    assert headers["Authorization"] == "Basic " + base64.b64encode(b"placeholder:").decode()
    assert headers["User-Agent"] == "custom-agent/1.0"


def test_list_addresses_sends_form_body(mock, client):
    mock.add(
        responses.GET,
        BASE + "addresses",
        json={"addresses": [{"id": "adr_1"}, {"id": "adr_2"}], "has_more": True},
    )
    result = client.list_addresses(ListOptions(before_id="adr_9", page_size=2))
    assert [item.id for item in result.addresses] == ["adr_1", "adr_2"]
    assert result.has_more is True
    request = mock.calls[0].request
    assert request.body == b"before_id=adr_9&page_size=2"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_verify_address_unwraps_nested_address(mock, client):
    mock.add(
        responses.GET,
        BASE + "addresses/adr_1/verify",
        json={"address": {"id": "adr_1", "verifications": {"delivery": {"success": True}}}},
    )
    result = client.verify_address("adr_1")
    assert result.id == "adr_1"
    assert result.verifications.delivery.success is True


def test_verify_address_without_address_gives_none(mock, client):
    mock.add(responses.GET, BASE + "addresses/adr_1/verify", json={})
    assert client.verify_address("adr_1") is None


def test_create_and_verify_address(mock, client):
    mock.add(responses.POST, BASE + "addresses/create_and_verify", json={"address": {"id": "adr_5"}})
    result = client.create_and_verify_address(Address(zip="91522"), None)
    assert result.id == "adr_5"
    assert _body(mock.calls[0]) == {"address": {"zip": "91522"}}


def test_get_api_keys_with_children(mock, client):
    mock.add(
        responses.GET,
        BASE + "api_keys",
        json={"id": "user_1", "keys": [{"mode": "test"}], "children": [{"id": "user_2"}]},
    )
    keys = client.get_api_keys()
    assert keys.id == "user_1"
    assert keys.keys[0].mode == "test"
    assert keys.children[0].id == "user_2"


def test_create_batch_wraps_shipments(mock, client):
    mock.add(responses.POST, BASE + "batches", json={"id": "batch_1", "num_shipments": 2})
    batch = client.create_batch({"id": "shp_100"}, {"id": "shp_101"})
    assert batch.num_shipments == 2
    assert _body(mock.calls[0]) == {"batch": {"shipments": [{"id": "shp_100"}, {"id": "shp_101"}]}}


def test_create_and_buy_empty_batch(mock, client):
    mock.add(responses.POST, BASE + "batches/create_and_buy", json={"id": "batch_2"})
    assert client.create_and_buy_batch().id == "batch_2"
    assert _body(mock.calls[0]) == {"batch": {}}


def test_add_and_remove_shipments_are_numbered(mock, client):
    mock.add(
        responses.POST,
        BASE + "batches/batch_1/add_shipments",
        json={"id": "batch_1", "num_shipments": 2},
    )
    mock.add(
        responses.POST,
        BASE + "batches/batch_1/remove_shipments",
        json={"id": "batch_1", "num_shipments": 1},
    )
    added = client.add_shipments_to_batch("batch_1", {"id": "shp_1"}, {"id": "shp_2"})
    removed = client.remove_shipments_from_batch("batch_1", {"id": "shp_2"})
    assert added.num_shipments == 2
    assert removed.num_shipments == 1
    assert _body(mock.calls[0]) == {"shipments": {"0": {"id": "shp_1"}, "1": {"id": "shp_2"}}}
    assert _body(mock.calls[1]) == {"shipments": {"0": {"id": "shp_2"}}}


def test_buy_batch_has_no_body(mock, client):
    mock.add(responses.POST, BASE + "batches/batch_1/buy", json={"id": "batch_1", "state": "purchasing"})
    assert client.buy_batch("batch_1").state == "purchasing"
    assert mock.calls[0].request.body is None


def test_batch_labels_and_scan_forms_send_file_format(mock, client):
    mock.add(responses.POST, BASE + "batches/batch_1/label", json={"id": "batch_1", "label_url": "x"})
    mock.add(responses.POST, BASE + "batches/batch_1/scan_form", json={"id": "batch_1"})
    assert client.get_batch_labels("batch_1", "pdf").label_url == "x"
    assert client.create_batch_scan_forms("batch_1", "zpl").id == "batch_1"
    assert mock.calls[0].request.body == b"file_format=pdf"
    assert mock.calls[1].request.body == b"file_format=zpl"


def test_get_batch_and_list_batches(mock, client):
    mock.add(responses.GET, BASE + "batches/batch_1", json={"id": "batch_1", "status": {"postage_purchased": 3}})
    mock.add(responses.GET, BASE + "batches", json={"batches": [{"id": "batch_1"}]})
    assert client.get_batch("batch_1").status.postage_purchased == 3
    assert [b.id for b in client.list_batches(None).batches] == ["batch_1"]


def test_carrier_types_and_accounts_lists(mock, client):
    mock.add(responses.GET, BASE + "carrier_types", json=[{"type": "UpsAccount"}, {"type": "FedexAccount"}])
    mock.add(responses.GET, BASE + "carrier_accounts", json=[{"id": "ca_1"}])
    assert [t.type for t in client.get_carrier_types()] == ["UpsAccount", "FedexAccount"]
    assert [a.id for a in client.list_carrier_accounts()] == ["ca_1"]


def test_create_and_get_carrier_account(mock, client):
    mock.add(responses.POST, BASE + "carrier_accounts", json={"id": "ca_1", "type": "UpsAccount"})
    mock.add(responses.GET, BASE + "carrier_accounts/ca_1", json={"id": "ca_1", "description": "NY"})
    created = client.create_carrier_account(
        CarrierAccount(type="UpsAccount", credentials={"user_id": "USERID"}, test_credentials={})
    )
    assert created.type == "UpsAccount"
    assert _body(mock.calls[0])["carrier_account"]["credentials"] == {"user_id": "USERID"}
    assert client.get_carrier_account("ca_1").description == "NY"


def test_update_carrier_account_patches_by_id(mock, client):
    mock.add(responses.PATCH, BASE + "carrier_accounts/ca_1", json={"id": "ca_1", "description": "FL"})
    result = client.update_carrier_account(CarrierAccount(id="ca_1", description="FL"))
    assert result.description == "FL"
    assert _body(mock.calls[0]) == {
        "carrier_account": {"id": "ca_1", "description": "FL", "credentials": None, "test_credentials": None}
    }


def test_delete_carrier_account(mock, client):
    mock.add(responses.DELETE, BASE + "carrier_accounts/ca_1", body="")
    assert client.delete_carrier_account("ca_1") is None
    assert mock.calls[0].request.method == "DELETE"


def test_customs_item_value_sent_as_string(mock, client):
    mock.add(responses.POST, BASE + "customs_items", json={"id": "cstitem_1", "value": "10"})
    item = client.create_customs_item(CustomsItem(description="T-shirt", quantity=1, value=10, weight=5))
    assert item.value == 10.0
    sent = _body(mock.calls[0])["customs_item"]
    assert sent["value"] == "10"
    assert sent["description"] == "T-shirt"


def test_customs_info_round_trip(mock, client):
    mock.add(
        responses.POST,
        BASE + "customs_infos",
        json={"id": "cstinfo_1", "customs_items": [{"id": "cstitem_1"}]},
    )
    mock.add(responses.GET, BASE + "customs_infos/cstinfo_1", json={"id": "cstinfo_1", "contents_type": "gift"})
    mock.add(responses.GET, BASE + "customs_items/cstitem_1", json={"id": "cstitem_1"})

    info = client.create_customs_info(CustomsInfo(contents_type="gift", customs_certify=True))
    assert info.customs_items[0].id == "cstitem_1"
    assert _body(mock.calls[0]) == {"customs_info": {"contents_type": "gift", "customs_certify": True}}
    assert client.get_customs_info("cstinfo_1").contents_type == "gift"
    assert client.get_customs_item("cstitem_1").id == "cstitem_1"


def test_get_event_decodes_result(mock, client):
    mock.add(
        responses.GET,
        BASE + "events/evt_1",
        json={"id": "evt_1", "description": "batch.created", "result": {"object": "Batch", "id": "batch_1"}},
    )
    event = client.get_event("evt_1")
    assert isinstance(event.result, Batch)
    assert event.result.id == "batch_1"


def test_list_events(mock, client):
    mock.add(responses.GET, BASE + "events", json={"events": [{"id": "evt_1"}], "has_more": False})
    result = client.list_events(ListOptions(page_size=1))
    assert [e.id for e in result.events] == ["evt_1"]
    assert mock.calls[0].request.body == b"page_size=1"


def test_list_event_payloads_decodes_request_body(mock, client):
    inner = {"object": "Event", "id": "evt_1", "result": {"object": "Batch", "id": "batch_1"}}
    mock.add(
        responses.GET,
        BASE + "events/evt_1/payloads",
        json={"payloads": [{"id": "payload_1", "request_body": json.dumps(inner)}]},
    )
    payloads = client.list_event_payloads("evt_1")
    assert [p.id for p in payloads] == ["payload_1"]
    assert isinstance(payloads[0].request_body, Event)
    assert payloads[0].request_body.result.id == "batch_1"


def test_insurance_operations(mock, client):
    mock.add(responses.POST, BASE + "insurances", json={"id": "ins_1", "amount": "100"})
    mock.add(responses.GET, BASE + "insurances", json={"insurances": [{"id": "ins_1"}], "has_more": False})
    mock.add(responses.GET, BASE + "insurances/ins_1", json={"id": "ins_1", "status": "new"})
    created = client.create_insurance(Insurance(tracking_code="EZ1000000001", amount="100"))
    assert created.amount == "100"
    assert _body(mock.calls[0]) == {"insurance": {"amount": "100", "tracking_code": "EZ1000000001"}}
    assert [i.id for i in client.list_insurances(None).insurances] == ["ins_1"]
    assert client.get_insurance("ins_1").status == "new"


def test_api_error_is_raised(mock, client):
    mock.add(
        responses.GET,
        BASE + "addresses/adr_bad",
        status=422,
        json={"error": {"code": "ADDRESS.VERIFY.FAILURE", "message": "Unable to verify"}},
    )
    with pytest.raises(APIError) as info:
        client.get_address("adr_bad")
    assert info.value.status_code == 422
    assert str(info.value) == "ADDRESS.VERIFY.FAILURE Unable to verify"


def test_missing_api_key_raises_without_request(mock):
    with pytest.raises(ValueError, match="no API key provided"):
        Client(api_key="").get_api_keys()
    assert len(mock.calls) == 0