"""Username availability use case."""

from uuid import UUID

from rolegate.domain.exceptions import ValidationError


class CheckUsernameAvailabilityUseCase:
    """Case-insensitive username availability, optionally ignoring one user."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, username: str, exclude_user_id: UUID | None = None) -> bool:
        username = (username or "").strip()
        if not username:
            raise ValidationError("username is required")
        async with self._uow_factory() as uow:
            return await uow.users.is_username_available(username, exclude_user_id)
