from typing import Sequence

from scoreboard.core.constants import UPDATABLE_TABLES
from scoreboard.db.database import Database, QueryResult


async def conditional_update(
    db: Database,
    table: str,
    id: int,
    fields: Sequence[str | None],
    values: Sequence[str | int | float | None],
) -> QueryResult | None | bool:
    """
    Update only the supplied columns of one row and return the updated row.

    `fields` and `values` are aligned positionally by the caller, a None in
    either marks a column that was not supplied. Returns False when nothing is
    left to update and None when the query failed.
    """
    if table not in UPDATABLE_TABLES:
        raise ValueError(f"table must be one of: {', '.join(sorted(UPDATABLE_TABLES))}")

    filtered_fields = [f for f in fields if isinstance(f, str)]
    filtered_values = [v for v in values if v is not None]

    if not filtered_fields:
        return False

    if len(filtered_fields) != len(filtered_values):
        raise ValueError("fields and values must be of equal length")

    if not all(f.isidentifier() for f in filtered_fields):
        raise ValueError("fields must be plain column names")

    # column names are interpolated, values are always bound
    updates = ", ".join(f"{field} = :v{i}" for i, field in enumerate(filtered_fields))
    params = {f"v{i}": value for i, value in enumerate(filtered_values)}
    params["id"] = id

    q = f"""
        UPDATE {table}
           SET {updates}
         WHERE id = :id
        RETURNING *
        """

    return await db.query(q, params)
