"""ListUsers Use Case"""
from libs.result import Result, Return
from src.app.repositories.user_repository import UserRepository
from src.app.use_cases.auth.mappers import to_profile_dto
from .dtos import UserListDTO


class ListUsers:
    """All accounts with their counters, newest registration first"""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(self) -> Result[UserListDTO]:
        users = await self.user_repo.list_all()
        return Return.ok(
            UserListDTO(users=[to_profile_dto(user) for user in users], total=len(users))
        )
