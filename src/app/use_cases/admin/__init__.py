"""Administration use cases"""
from .list_users import ListUsers
from .get_platform_stats import GetPlatformStats
from .delete_user import DeleteUser
from .user_profile import GetUserProfile, UpdateUserProfile
from .dtos import UserListDTO, PlatformStatsDTO, UpdateProfileCommandDTO

__all__ = [
    "ListUsers",
    "GetPlatformStats",
    "DeleteUser",
    "GetUserProfile",
    "UpdateUserProfile",
    "UserListDTO",
    "PlatformStatsDTO",
    "UpdateProfileCommandDTO",
]
