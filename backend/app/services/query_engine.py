"""
Listing query engine.

Turns raw query-string parameters into a filtered, sorted and paginated view
over a collection of vehicles. Parsing never fails: malformed values are
treated as absent, and pagination values are clamped into safe bounds.

Decisions for the ambiguous parts of the listing API:
- ``brand`` is a case-insensitive substring match.
- ``fuelType`` is a case-insensitive exact match against a comma-separated set.
- ``q`` matches case-insensitively against brand, model and description.
- Missing values (e.g. a vehicle without a price) never satisfy a filter on
  that field and always sort after present values, whatever the order.
"""

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# Public sort key -> attribute name on the vehicle record
SORT_FIELDS = {
    "createdAt": "created_at",
    "price": "price",
    "year": "year",
    "mileage": "mileage",
    "brand": "brand",
    "model": "model",
}
DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_ORDER = "desc"

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Parameters whose presence switches the listing endpoint from the bare
# list to the paginated envelope
QUERY_PARAMS = (
    "page",
    "limit",
    "brand",
    "minPrice",
    "maxPrice",
    "minYear",
    "maxYear",
    "minMileage",
    "maxMileage",
    "fuelType",
    "q",
    "sortBy",
    "order",
)

# Range filters: (min param, max param, attribute)
RANGE_FILTERS = (
    ("minPrice", "maxPrice", "price"),
    ("minYear", "maxYear", "year"),
    ("minMileage", "maxMileage", "mileage"),
)

TEXT_SEARCH_FIELDS = ("brand", "model", "description")


def parse_number(value: Any) -> float | None:
    """Parse a numeric query value; anything unparseable or non-finite is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_int(value: Any) -> int | None:
    number = parse_number(value)
    if number is None:
        return None
    return int(number)


def normalize_page(value: Any) -> int:
    """Page numbers start at 1; non-positive or non-numeric input becomes 1."""
    page = parse_int(value)
    if page is None or page < 1:
        return 1
    return page


def normalize_limit(value: Any, default: int = DEFAULT_PAGE_SIZE, maximum: int = MAX_PAGE_SIZE) -> int:
    """Clamp a page size into [1, maximum]; non-numeric input uses the default."""
    limit = parse_int(value)
    if limit is None:
        return default
    return min(max(1, limit), maximum)


def compute_total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


def _split_csv(value: Any) -> list[str]:
    if value is None:
        return []
    return [part.strip().lower() for part in str(value).split(",") if part.strip()]


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class RangeFilter:
    attribute: str
    minimum: float | None = None
    maximum: float | None = None

    def matches(self, record: Any) -> bool:
        value = getattr(record, self.attribute, None)
        if value is None:
            return False
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True


@dataclass(frozen=True)
class ListingQuery:
    """Normalized listing query. Build it with :meth:`from_params`."""

    brand: str | None = None
    fuel_types: tuple[str, ...] = ()
    text: str | None = None
    ranges: tuple[RangeFilter, ...] = ()
    sort_by: str = DEFAULT_SORT_FIELD
    order: str = DEFAULT_ORDER
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> "ListingQuery":
        ranges = []
        for min_key, max_key, attribute in RANGE_FILTERS:
            minimum = parse_number(params.get(min_key))
            maximum = parse_number(params.get(max_key))
            if minimum is not None or maximum is not None:
                ranges.append(RangeFilter(attribute, minimum, maximum))

        brand = _text(params.get("brand"))
        text = _text(params.get("q"))

        sort_by = params.get("sortBy")
        if sort_by not in SORT_FIELDS:
            sort_by = DEFAULT_SORT_FIELD

        order = str(params.get("order") or "").strip().lower()
        if order not in ("asc", "desc"):
            order = DEFAULT_ORDER

        return cls(
            brand=brand.lower() if brand else None,
            fuel_types=tuple(_split_csv(params.get("fuelType"))),
            text=text.lower() if text else None,
            ranges=tuple(ranges),
            sort_by=sort_by,
            order=order,
            page=normalize_page(params.get("page")),
            limit=normalize_limit(params.get("limit"), default_limit, max_limit),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def predicates(self) -> list[Callable[[Any], bool]]:
        """One predicate per active filter. They are independent and commute."""
        predicates: list[Callable[[Any], bool]] = []

        if self.brand:
            brand = self.brand
            predicates.append(lambda v: _contains(getattr(v, "brand", None), brand))

        if self.fuel_types:
            fuel_types = set(self.fuel_types)
            predicates.append(
                lambda v: (getattr(v, "fuel_type", None) or "").lower() in fuel_types
            )

        if self.text:
            text = self.text
            predicates.append(
                lambda v: any(_contains(getattr(v, attr, None), text) for attr in TEXT_SEARCH_FIELDS)
            )

        predicates.extend(r.matches for r in self.ranges)
        return predicates


def _contains(value: Any, needle: str) -> bool:
    if value is None:
        return False
    return needle in str(value).lower()


def _sort_value(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value


def sort_records(records: Iterable[T], sort_by: str, order: str) -> list[T]:
    """
    Stable sort on one field.

    Strings compare case-insensitively, numbers and datetimes natively.
    Records without a value keep their relative order at the end.
    """
    attribute = SORT_FIELDS.get(sort_by, SORT_FIELDS[DEFAULT_SORT_FIELD])
    present = []
    missing = []
    for record in records:
        if getattr(record, attribute, None) is None:
            missing.append(record)
        else:
            present.append(record)

    # sorted(reverse=True) keeps equal elements in their original order
    present = sorted(
        present,
        key=lambda r: _sort_value(getattr(r, attribute)),
        reverse=(order == "desc"),
    )
    return present + missing


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        self.total_pages = compute_total_pages(self.total, self.limit)


def has_query_params(params: Mapping[str, Any]) -> bool:
    """True when any listing query parameter was supplied (even with a bad value)."""
    return any(params.get(key) not in (None, "") for key in QUERY_PARAMS)


def query(listings: Sequence[T], params: ListingQuery | Mapping[str, Any]) -> Page[T]:
    """
    Filter, sort and paginate ``listings``.

    ``total`` counts every match before pagination; a page past the end is
    empty but still reports the correct ``total`` and ``total_pages``.
    """
    if not isinstance(params, ListingQuery):
        params = ListingQuery.from_params(params)

    predicates = params.predicates()
    filtered = [record for record in listings if all(p(record) for p in predicates)]
    ordered = sort_records(filtered, params.sort_by, params.order)

    start = params.offset
    return Page(
        items=ordered[start:start + params.limit],
        total=len(filtered),
        page=params.page,
        limit=params.limit,
    )
