"""Data objects exchanged with the shipping API and their JSON forms."""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import UnionType
from typing import Any, ForwardRef, Union, get_args, get_origin

_KEEP = {"omitempty": False}
_AS_STRING = {"as_string": True}

_TIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})\Z"
)
_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?\Z")

_MODELS: dict[str, type] = {}


def _kept(default: Any = None) -> Any:
    """A field that is written to JSON even when it holds its zero value."""
    return field(default=default, metadata=_KEEP)


def _parse_time(text: str) -> datetime:
    match = _TIME_RE.match(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time: {text!r}")
    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    micros = int((match.group(7) or "")[:6].ljust(6, "0"))
    zone = match.group(8)
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)


def _format_time(moment: datetime, *, fractional: bool = True) -> str:
    """RFC 3339 text; naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if fractional and moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    if not offset:
        return text + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def _format_number(number: float) -> str:
    number = float(number)
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"unsupported number: {number!r}")
    if number == 0:
        return "0"
    text = repr(number)
    if 1e-6 <= abs(number) < 1e21:
        text = format(Decimal(text), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
    return text


def _parse_number(value: Any, name: str) -> float:
    if not isinstance(value, str):
        raise TypeError(f"field {name!r} must be a quoted number")
    if not _NUMBER_RE.match(value):
        raise ValueError(f"field {name!r} holds an invalid number: {value!r}")
    return float(value)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict, tuple)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return value == 0
    return False


def _resolve(hint: Any) -> Any:
    """Turn a forward reference to a model into the model class."""
    if isinstance(hint, ForwardRef):
        hint = hint.__forward_arg__
    if isinstance(hint, str):
        try:
            return _MODELS[hint]
        except KeyError:
            raise TypeError(f"unknown model type {hint!r}") from None
    return hint


def _decode(hint: Any, value: Any, name: str) -> Any:
    hint = _resolve(hint)
    origin = get_origin(hint)
    if origin in (Union, UnionType):
        if value is None:
            return None
        (hint,) = [arg for arg in get_args(hint) if arg is not type(None)]
        return _decode(hint, value, name)
    if value is None or hint is Any:
        return value
    if origin is list:
        if not isinstance(value, list):
            raise TypeError(f"field {name!r} must be a list")
        (item_hint,) = get_args(hint)
        return [_decode(item_hint, item, name) for item in value]
    if origin is dict:
        if not isinstance(value, Mapping):
            raise TypeError(f"field {name!r} must be an object")
        _, item_hint = get_args(hint)
        return {key: _decode(item_hint, item, name) for key, item in value.items()}
    if hint is datetime:
        if not isinstance(value, str):
            raise TypeError(f"field {name!r} must be a time string")
        return _parse_time(value)
    if hint is bool:
        if not isinstance(value, bool):
            raise TypeError(f"field {name!r} must be a boolean")
        return value
    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"field {name!r} must be an integer")
        return value
    if hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"field {name!r} must be a number")
        return float(value)
    if hint is str:
        if not isinstance(value, str):
            raise TypeError(f"field {name!r} must be a string")
        return value
    if isinstance(hint, type) and issubclass(hint, Model):
        return hint.from_dict(value)
    raise TypeError(f"field {name!r} has an unsupported type {hint!r}")


def _encode(value: Any) -> Any:
    if isinstance(value, Model):
        return value.to_dict()
    if isinstance(value, datetime):
        return _format_time(value)
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _encode(item) for key, item in value.items()}
    return value


class Model:
    """Base of the API's data objects: decoding from and encoding to JSON dicts."""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _MODELS[cls.__name__] = cls

    @classmethod
    def from_dict(cls, data):
        """Build an instance from a decoded JSON object; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} must be decoded from a JSON object")
        values = {}
        for spec in fields(cls):
            raw = data.get(spec.name)
            if raw is None:
                continue
            if spec.metadata.get("as_string"):
                values[spec.name] = _parse_number(raw, spec.name)
            else:
                values[spec.name] = _decode(spec.type, raw, spec.name)
        return cls(**values)

    def to_dict(self):
        """The JSON object for this instance; empty fields are left out."""
        result: dict[str, Any] = {}
        for spec in fields(self):
            value = getattr(self, spec.name)
            if spec.metadata.get("omitempty", True) and _is_empty(value):
                continue
            if spec.metadata.get("as_string"):
                result[spec.name] = _format_number(value)
            else:
                result[spec.name] = _encode(value)
        return result


@dataclass
class AddressVerificationFieldError(Model):
    """Details on why one field of an address failed verification."""

    code: str = ""
    field: str = ""
    message: str = ""
    suggestion: str = ""


@dataclass
class AddressVerificationDetails(Model):
    """Extra information produced by address verification."""

    latitude: float = _kept(0.0)
    longitude: float = _kept(0.0)
    time_zone: str = _kept("")


@dataclass
class AddressVerification(Model):
    """The outcome of one kind of address verification."""

    success: bool = _kept(False)
    errors: list[AddressVerificationFieldError] | None = _kept()
    details: AddressVerificationDetails | None = _kept()


@dataclass
class AddressVerifications(Model):
    """Results of the requested address verifications."""

    zip4: AddressVerification | None = _kept()
    delivery: AddressVerification | None = _kept()


@dataclass
class Address(Model):
    """A person, place or organisation used in shipping."""

    id: str = ""
    object: str = ""
    reference: str = ""
    mode: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    street1: str = ""
    street2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    name: str = ""
    company: str = ""
    phone: str = ""
    email: str = ""
    residential: bool = False
    carrier_facility: str = ""
    federal_tax_id: str = ""
    state_tax_id: str = ""
    verifications: AddressVerifications | None = None


@dataclass
class CreateAddressOptions(Model):
    """Verification options sent along with a new address."""

    verify: list[str] = field(default_factory=list)
    verify_strict: list[str] = field(default_factory=list)


@dataclass
class ListAddressResult(Model):
    """One page of addresses; has_more tells whether more pages follow."""

    addresses: list[Address] = field(default_factory=list)
    has_more: bool = False


@dataclass
class APIKey(Model):
    """A single API key."""

    object: str = ""
    mode: str = ""
    created_at: datetime | None = None
    key: str = ""


@dataclass
class APIKeys(Model):
    """The API keys of a user and of its child users."""

    id: str = ""
    children: list["APIKeys"] = field(default_factory=list)
    keys: list[APIKey] = field(default_factory=list)


@dataclass
class BatchStatus(Model):
    """Counts of shipment states within a batch."""

    postage_purchased: int = 0
    postage_purchase_failed: int = 0
    queued_for_purchase: int = 0
    creation_failed: int = 0


@dataclass
class Batch(Model):
    """A batch of shipments."""

    id: str = ""
    object: str = ""
    reference: str = ""
    mode: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    state: str = ""
    num_shipments: int = 0
    shipments: list[dict[str, Any]] = field(default_factory=list)
    status: BatchStatus | None = None
    label_url: str = ""
    scan_form: dict[str, Any] | None = None
    pickup: dict[str, Any] | None = None


@dataclass
class ListBatchesResult(Model):
    """One page of batches; has_more tells whether more pages follow."""

    batches: list[Batch] = field(default_factory=list)
    has_more: bool = False


@dataclass
class Brand(Model):
    """Branding settings of a user."""

    id: str = ""
    background_color: str = ""
    color: str = ""
    logo: str = ""
    logo_href: str = ""
    ad: str = ""
    ad_href: str = ""
    name: str = ""
    user_id: str = ""
    theme: str = ""


@dataclass
class CarrierField(Model):
    """A single field of a carrier account."""

    visibility: str = ""
    label: str = ""
    value: str = ""


@dataclass
class CarrierFields(Model):
    """Carrier account fields for production and test credentials."""

    credentials: dict[str, CarrierField] = field(default_factory=dict)
    test_credentials: dict[str, CarrierField] = field(default_factory=dict)
    auto_link: bool = False
    custom_workflow: bool = False


@dataclass
class CarrierAccount(Model):
    """Credentials and settings of a carrier account."""

    id: str = ""
    object: str = ""
    reference: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    type: str = ""
    fields: CarrierFields | None = None
    clone: bool = False
    description: str = ""
    readable: str = ""
    credentials: dict[str, str] | None = _kept()
    test_credentials: dict[str, str] | None = _kept()
    billing_type: str = ""


@dataclass
class CarrierType(Model):
    """A supported carrier and the fields its accounts take."""

    object: str = ""
    type: str = ""
    fields: CarrierFields | None = None


@dataclass
class CarrierMessage(Model):
    """Additional status data that some carriers provide."""

    carrier: str = ""
    type: str = ""
    message: str = ""
    carrier_account_id: str = ""


@dataclass
class CustomsItem(Model):
    """Goods described for an international shipment."""

    id: str = ""
    object: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    description: str = ""
    quantity: float = 0.0
    value: float = field(default=0.0, metadata=_AS_STRING)
    weight: float = 0.0
    hs_tariff_number: str = ""
    code: str = ""
    origin_country: str = ""
    currency: str = ""


@dataclass
class CustomsInfo(Model):
    """Customs items and the information needed for customs forms."""

    id: str = ""
    object: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    eel_pfc: str = ""
    contents_type: str = ""
    contents_explanation: str = ""
    customs_certify: bool = False
    customs_signer: str = ""
    non_delivery_option: str = ""
    restriction_type: str = ""
    customs_items: list[CustomsItem] = field(default_factory=list)
    declaration: str = ""


@dataclass
class Fee(Model):
    """One part of the charges made for a purchase."""

    object: str = ""
    type: str = ""
    amount: str = ""
    charged: bool = False
    refunded: bool = False


@dataclass
class Insurance(Model):
    """Insurance for a package."""

    id: str = ""
    object: str = ""
    reference: str = ""
    mode: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    amount: str = ""
    carrier: str = ""
    provider: str = ""
    provider_id: str = ""
    shipment_id: str = ""
    tracking_code: str = ""
    status: str = ""
    tracker: dict[str, Any] | None = None
    to_address: Address | None = None
    from_address: Address | None = None
    fee: Fee | None = None
    messages: list[str] = field(default_factory=list)


@dataclass
class ListInsurancesResult(Model):
    """One page of insurances; has_more tells whether more pages follow."""

    insurances: list[Insurance] = field(default_factory=list)
    has_more: bool = False


@dataclass
class ListOptions:
    """Query parameters for listing objects."""

    before_id: str = ""
    after_id: str = ""
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    page_size: int = 0

    def to_query(self) -> dict[str, str]:
        """The query parameters, leaving out those that are unset."""
        query: dict[str, str] = {}
        if self.before_id:
            query["before_id"] = self.before_id
        if self.after_id:
            query["after_id"] = self.after_id
        if self.start_datetime is not None:
            query["start_datetime"] = _format_time(self.start_datetime, fractional=False)
        if self.end_datetime is not None:
            query["end_datetime"] = _format_time(self.end_datetime, fractional=False)
        if self.page_size:
            query["page_size"] = str(self.page_size)
        return query