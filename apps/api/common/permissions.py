# PATH: apps/api/common/permissions.py

from rest_framework.permissions import SAFE_METHODS, BasePermission


def is_admin_user(user) -> bool:
    return bool(
        user
        and user.is_authenticated
        and (user.is_superuser or user.is_staff)
    )


class IsAdminOrStaff(BasePermission):
    """
    관리자 / 운영자 전용 Permission
    """
    def has_permission(self, request, view):
        return is_admin_user(request.user)


class IsAdminOrReadOnly(BasePermission):
    """
    조회(GET/HEAD/OPTIONS)는 로그인 사용자 전체,
    변경(POST/PUT/PATCH/DELETE)은 관리자만.
    """
    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return is_admin_user(user)
