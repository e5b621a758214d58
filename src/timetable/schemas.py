"""Column layouts of the published booking sheet.

The sheet has been re-laid out over time; each known layout is registered in
SCHEMAS under a version key. Column indices are zero-based (A=0, B=1, ...).
A new layout is a new entry here, not a parser change.
"""

from pydantic import BaseModel, ConfigDict

DEFAULT_SCHEMA = "v1"


class ColumnSchema(BaseModel):
    """Where each logical field sits in a feed row.

    Optional columns set to None are absent from the layout and read as "".
    Rows shorter than ``min_width`` are dropped before any field is read.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    min_width: int
    date: int
    day: int
    start_time: int
    end_time: int
    room: int
    public_name: int
    visible: int  # "Show Online" flag column
    session_type: int | None = None
    hirer: int | None = None
    contact: int | None = None
    contact_email: int | None = None
    notes: int | None = None
    # When set, only rows booked into one of these rooms are kept
    allowed_rooms: frozenset[str] | None = None

    def with_allowed_rooms(self, rooms: frozenset[str] | None) -> "ColumnSchema":
        return self.model_copy(update={"allowed_rooms": rooms})


# 10-column "Public Calendar" tab:
# A=Date, B=Day, C=Start, D=End, E=Room, F=Hirer, G=Contact,
# H=Session Type, I=Public Name, J=Show Online, K=Contact Email (optional)
PUBLIC_CALENDAR_V1 = ColumnSchema(
    name="v1",
    min_width=10,
    date=0,
    day=1,
    start_time=2,
    end_time=3,
    room=4,
    hirer=5,
    contact=6,
    session_type=7,
    public_name=8,
    visible=9,
    contact_email=10,
)

# 15-column "Bookings" tab:
# A=Date, B=Day, C=Start, D=End, E=Room, F=Hirer, G=Contact, H=Contact Email,
# I=Phone, J=Session Type, K=Public Name, L=Show Online, M=Notes,
# N=Invoice, O=Paid
BOOKINGS_V2 = ColumnSchema(
    name="v2",
    min_width=15,
    date=0,
    day=1,
    start_time=2,
    end_time=3,
    room=4,
    hirer=5,
    contact=6,
    contact_email=7,
    session_type=9,
    public_name=10,
    visible=11,
    notes=12,
    allowed_rooms=frozenset({"Main Hall", "Sports Hall", "Studio", "Meeting Room"}),
)

SCHEMAS: dict[str, ColumnSchema] = {
    PUBLIC_CALENDAR_V1.name: PUBLIC_CALENDAR_V1,
    BOOKINGS_V2.name: BOOKINGS_V2,
}


def get_schema(
    name: str = DEFAULT_SCHEMA, allowed_rooms: frozenset[str] | None = None
) -> ColumnSchema:
    """Look up a registered layout, optionally overriding its room allow-list.

    Args:
        name: Schema key from SCHEMAS (e.g., "v1").
        allowed_rooms: Room allow-list that replaces the layout's default.

    Raises:
        ValueError: If the schema key is not recognized.
    """
    schema = SCHEMAS.get(name)
    if schema is None:
        raise ValueError(f"Unknown schema {name!r}. Valid: {list(SCHEMAS.keys())}")
    if allowed_rooms is not None:
        schema = schema.with_allowed_rooms(allowed_rooms)
    return schema
