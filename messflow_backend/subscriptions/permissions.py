# subscriptions/permissions.py

"""
PLAN / SUBSCRIPTION PERMISSIONS (DRF)

- HasActiveSubscription: safe methods always pass; writes are refused
  once the subscription is expired (data stays readable).
- CanAddMember / CanGenerateInvoice / CanUploadReceipt: free-tier gate
  on the endpoints that initiate those actions.
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission

from subscriptions.services.limits import get_limits
from subscriptions.services.subscription import get_subscription_state


class HasActiveSubscription(BasePermission):
    message = "Your subscription has expired. Renew to continue making changes."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return not get_subscription_state(user).is_expired


class _GateOnCreate(BasePermission):
    """Only the create action is gated; everything else passes through."""

    def _allowed(self, request) -> bool:
        raise NotImplementedError

    def has_permission(self, request, view):
        if request.method != "POST" or getattr(view, "action", "create") != "create":
            return True
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return self._allowed(request)


class CanAddMember(_GateOnCreate):
    message = "Free plan member limit reached. Upgrade to add more members."

    def _allowed(self, request) -> bool:
        return get_limits(request.user).can_add_member


class CanGenerateInvoice(BasePermission):
    message = "Free plan invoice limit reached. Upgrade to generate more invoices."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return get_limits(user).can_generate_invoice


class CanUploadReceipt(_GateOnCreate):
    message = "Free plan receipt limit reached. Upgrade to attach more receipts."

    def _allowed(self, request) -> bool:
        if not (request.data or {}).get("receipt_url"):
            return True
        return get_limits(request.user).can_upload_receipt
