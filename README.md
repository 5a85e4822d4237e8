# easypost

A Python client for the EasyPost shipping API. It covers addresses, API keys,
batches, carrier accounts and carrier types, customs infos and customs items,
events and their webhook payloads, and insurance.

## Installation

```
pip install easypost
```

To run the test suite:

```
pip install "easypost[test]"
pytest
```

## Quick start

```python
from easypost.client import Client
from easypost.models import Address, CreateAddressOptions

client = Client("placeholder")

address = client.create_address(
    Address(
        name="Bugs Bunny",
        street1="4000 Warner Blvd",
        city="Burbank",
        state="CA",
        zip="91522",
    ),
    CreateAddressOptions(verify=["delivery"]),
)
print(address.id)
```

The data objects live in `easypost.models` and are dataclasses. Each has
`from_dict` to build it from a decoded JSON object (unknown keys are ignored)
and `to_dict` to produce the JSON object, leaving out empty fields.
`CustomsItem.value` is sent and read as a quoted number, as the API expects.

## What the client does

`easypost.client.Client` has these methods:

- Addresses: `create_address`, `create_and_verify_address`, `verify_address`,
  `get_address`, `list_addresses`
- API keys: `get_api_keys`
- Batches: `create_batch`, `create_and_buy_batch`, `list_batches`,
  `add_shipments_to_batch`, `remove_shipments_from_batch`, `buy_batch`,
  `get_batch`, `get_batch_labels`, `create_batch_scan_forms`
- Carriers: `get_carrier_types`, `create_carrier_account`,
  `list_carrier_accounts`, `get_carrier_account`, `update_carrier_account`,
  `delete_carrier_account`
- Customs: `create_customs_info`, `get_customs_info`, `create_customs_item`,
  `get_customs_item`
- Events: `list_events`, `get_event`, `list_event_payloads`
- Insurance: `create_insurance`, `list_insurances`, `get_insurance`

Shipments are given to the batch methods as plain dicts, for example
`client.create_batch({"id": "shp_100"}, {"id": "shp_101"})`.

## Listing with pagination

List calls take a `ListOptions` and return a result with a `has_more` flag.
Dates in `start_datetime` and `end_datetime` are sent as RFC 3339 text; a
datetime without a time zone is taken to be UTC. To fetch the next page, set
`before_id` to the ID of the last item received:

```python
from easypost.models import ListOptions

options = ListOptions(page_size=20)
while True:
    page = client.list_events(options)
    for event in page.events:
        print(event.id, event.description)
    if not page.has_more:
        break
    options.before_id = page.events[-1].id
```

## Events and webhooks

`decode_object` in `easypost.objects` takes JSON text (str or bytes) or an
already decoded value and returns the matching model, picking the class from
the document's `"object"` field. The types it knows are `Address`, `ApiKey`,
`Batch`, `CarrierAccount`, `CarrierType`, `CustomsInfo`, `CustomsItem`,
`Event`, `Insurance` and `Payload`; any other object comes back as a plain
dict, and empty text gives `None`.

An `Event` has its `result` decoded the same way, so a `Batch` or `Insurance`
result comes back as that object. An `EventPayload` decodes its
`request_body`, first undoing a base64 encoding if there is one; if the body
cannot be decoded it keeps the body text.

```python
from easypost.objects import decode_object

event = decode_object(request_body_bytes)
print(event.description, event.result)
```

## Errors

When the API answers with an HTTP error status, `easypost.errors.APIError` is
raised. It carries `status_code`, `status`, `code`, `message`, `field`,
`suggestion` and any nested `errors`. Its text is the code and message when
present, otherwise the status. A request made without an API key raises
`ValueError`.

```python
from easypost.errors import APIError

try:
    client.get_address("adr_123")
except APIError as exc:
    print(exc.status_code, exc.code, exc)
```

## Configuration

`Client` takes the API key. It also accepts a `base_url` (default
`https://api.easypost.com/v2/`), a `user_agent`, a `timeout` in milliseconds
(zero, negative or `None` means 60000) and a `requests.Session` to send the
requests with. The lower-level `easypost.transport.HTTPTransport` takes the
same arguments and offers `request`, `get`, `post`, `patch` and `delete`,
returning decoded JSON.

## What this package does not do

It has no methods for shipments, rates, parcels, trackers, pickups, scan forms
as standalone objects, users and brands, webhooks management or billing.
Shipments, trackers, scan forms and pickups that appear inside batches or
insurances are kept as plain dicts. There is no command-line tool and no
webhook server; decoding a webhook body is left to `decode_object`.