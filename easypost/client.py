"""High-level client for the shipping API's addresses, batches, carriers and more."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import (
    Address,
    APIKeys,
    Batch,
    CarrierAccount,
    CarrierType,
    CreateAddressOptions,
    CustomsInfo,
    CustomsItem,
    Insurance,
    ListAddressResult,
    ListBatchesResult,
    ListInsurancesResult,
    ListOptions,
    Model,
)
from .objects import Event, EventPayload, ListEventsResult
from .transport import FormData, HTTPTransport


def _decode(model: type[Model], data: Any) -> Any:
    return None if data is None else model.from_dict(data)


def _decode_list(model: type[Model], data: Any) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"expected a list of {model.__name__} objects")
    return [_decode(model, item) for item in data]


def _field(data: Any, key: str) -> Any:
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise TypeError("expected a JSON object in the response")
    return data.get(key)


def _list_query(options: ListOptions | None) -> FormData:
    return FormData((options or ListOptions()).to_query())


def _numbered(shipments: tuple[Any, ...]) -> dict[str, Any]:
    return {"shipments": {str(index): shipment for index, shipment in enumerate(shipments)}}


class Client:
    """Operations on the shipping API, authenticated with one API key.

    ``timeout`` is in milliseconds; zero, a negative value or ``None`` means
    one minute.
    """

    def __init__(self, api_key, base_url=None, user_agent=None, timeout=None, session=None):
        self._transport = HTTPTransport(api_key, base_url, user_agent, timeout, session)

    # Addresses

    def create_address(self, address, options=None):
        """Create an address, optionally asking for verifications."""
        body: dict[str, Any] = {}
        if options is not None:
            body.update(options.to_dict())
        if address is not None:
            body["address"] = address.to_dict()
        return _decode(Address, self._transport.post("addresses", body))

    def list_addresses(self, options=None):
        """One page of addresses."""
        data = self._transport.request("GET", "addresses", _list_query(options))
        return _decode(ListAddressResult, data)

    def verify_address(self, address_id):
        """Verify a stored address and return it with its verification results."""
        data = self._transport.get(f"addresses/{address_id}/verify")
        return _decode(Address, _field(data, "address"))

    def get_address(self, address_id):
        """Retrieve an address by its ID."""
        return _decode(Address, self._transport.get(f"addresses/{address_id}"))

    def create_and_verify_address(self, address, options=None):
        """Create an address and verify it in one request."""
        body: dict[str, Any] = {}
        if options is not None:
            body.update(options.to_dict())
        if address is not None:
            body["address"] = address.to_dict()
        data = self._transport.post("addresses/create_and_verify", body)
        return _decode(Address, _field(data, "address"))

    # API keys

    def get_api_keys(self):
        """The API keys of the current user and its children."""
        return _decode(APIKeys, self._transport.get("api_keys"))

    # Batches

    def create_batch(self, *args):
        """Create a batch, optionally holding the given shipments."""
        body = {"batch": Batch(shipments=list(args)).to_dict()}
        return _decode(Batch, self._transport.post("batches", body))

    def create_and_buy_batch(self, *args):
        """Create a batch of the given shipments and buy it in one request."""
        body = {"batch": Batch(shipments=list(args)).to_dict()}
        return _decode(Batch, self._transport.post("batches/create_and_buy", body))

    def list_batches(self, options=None):
        """One page of batches."""
        data = self._transport.request("GET", "batches", _list_query(options))
        return _decode(ListBatchesResult, data)

    def add_shipments_to_batch(self, batch_id, *args):
        """Add shipments to a batch and return the updated batch."""
        data = self._transport.post(f"batches/{batch_id}/add_shipments", _numbered(args))
        return _decode(Batch, data)

    def remove_shipments_from_batch(self, batch_id, *args):
        """Remove shipments from a batch and return the updated batch."""
        data = self._transport.post(f"batches/{batch_id}/remove_shipments", _numbered(args))
        return _decode(Batch, data)

    def buy_batch(self, batch_id):
        """Start buying postage for every shipment in a batch."""
        return _decode(Batch, self._transport.post(f"batches/{batch_id}/buy"))

    def get_batch(self, batch_id):
        """Retrieve a batch by its ID."""
        return _decode(Batch, self._transport.get(f"batches/{batch_id}"))

    def get_batch_labels(self, batch_id, file_format):
        """Generate the label file of a batch in the given format."""
        body = FormData({"file_format": file_format})
        return _decode(Batch, self._transport.post(f"batches/{batch_id}/label", body))

    def create_batch_scan_forms(self, batch_id, file_format):
        """Generate a scan form for a batch in the given format."""
        body = FormData({"file_format": file_format})
        return _decode(Batch, self._transport.post(f"batches/{batch_id}/scan_form", body))

    # Carriers

    def get_carrier_types(self):
        """The carrier types available to the current user."""
        return _decode_list(CarrierType, self._transport.get("carrier_types"))

    def create_carrier_account(self, account):
        """Create a carrier account (production keys only)."""
        body = {"carrier_account": account.to_dict()} if account is not None else {}
        return _decode(CarrierAccount, self._transport.post("carrier_accounts", body))

    def list_carrier_accounts(self):
        """Every carrier account of the authenticated user."""
        return _decode_list(CarrierAccount, self._transport.get("carrier_accounts"))

    def get_carrier_account(self, carrier_account_id):
        """Retrieve a carrier account by its ID or reference."""
        data = self._transport.get(f"carrier_accounts/{carrier_account_id}")
        return _decode(CarrierAccount, data)

    def update_carrier_account(self, account):
        """Update the carrier account identified by ``account.id``."""
        body = {"carrier_account": account.to_dict()}
        data = self._transport.patch(f"carrier_accounts/{account.id}", body)
        return _decode(CarrierAccount, data)

    def delete_carrier_account(self, carrier_account_id):
        """Remove a carrier account."""
        self._transport.delete(f"carrier_accounts/{carrier_account_id}")

    # Customs

    def create_customs_info(self, customs_info):
        """Create a customs info object."""
        body = {"customs_info": customs_info.to_dict()} if customs_info is not None else {}
        return _decode(CustomsInfo, self._transport.post("customs_infos", body))

    def get_customs_info(self, customs_info_id):
        """Retrieve a customs info object by its ID or reference."""
        return _decode(CustomsInfo, self._transport.get(f"customs_infos/{customs_info_id}"))

    def create_customs_item(self, customs_item):
        """Create a customs item."""
        body = {"customs_item": customs_item.to_dict()} if customs_item is not None else {}
        return _decode(CustomsItem, self._transport.post("customs_items", body))

    def get_customs_item(self, customs_item_id):
        """Retrieve a customs item by its ID or reference."""
        return _decode(CustomsItem, self._transport.get(f"customs_items/{customs_item_id}"))

    # Events

    def list_events(self, options=None):
        """One page of events."""
        data = self._transport.request("GET", "events", _list_query(options))
        return _decode(ListEventsResult, data)

    def get_event(self, event_id):
        """Retrieve an event by its ID."""
        return _decode(Event, self._transport.get(f"events/{event_id}"))

    def list_event_payloads(self, event_id):
        """The webhook calls made for an event."""
        data = self._transport.get(f"events/{event_id}/payloads")
        return _decode_list(EventPayload, _field(data, "payloads"))

    # Insurance

    def create_insurance(self, insurance):
        """Insure a shipment bought outside the API."""
        body = {"insurance": insurance.to_dict()} if insurance is not None else {}
        return _decode(Insurance, self._transport.post("insurances", body))

    def list_insurances(self, options=None):
        """One page of insurances."""
        data = self._transport.request("GET", "insurances", _list_query(options))
        return _decode(ListInsurancesResult, data)

    def get_insurance(self, insurance_id):
        """Retrieve an insurance by its ID or reference."""
        return _decode(Insurance, self._transport.get(f"insurances/{insurance_id}"))


__all__ = ["Client", "CreateAddressOptions", "ListOptions"]