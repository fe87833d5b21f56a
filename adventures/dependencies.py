# adventures/dependencies.py

"""
Зависимости для использования в endpoints
"""

from typing import List

from fastapi import Query

from adventures.utils.exceptions import ValidationError


async def get_feed_user_ids(
        user_ids: List[str] = Query(..., alias="userIds"),
) -> List[int]:
    """
    Список id для ленты.

    Принимает и userIds=1,2,3, и userIds=1&userIds=2.
    """
    ids: List[int] = []
    for raw in user_ids:
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                ids.append(int(part))
            except ValueError:
                raise ValidationError(f"Invalid user id: {part}")
    return ids
