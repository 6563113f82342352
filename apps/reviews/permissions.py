from rest_framework import permissions

from apps.accounts.permissions import is_moderator


class IsReviewOwnerOrAdmin(permissions.BasePermission):
    """
    Permission: the review author or an Admin/SuperAdmin may change a review.
    Anyone can read reviews.
    """

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True

        return obj.user_id == request.user.id or is_moderator(request.user)
