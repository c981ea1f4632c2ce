"""
Role checks based on Django auth groups
"""
from rest_framework.permissions import BasePermission

ROLE_ADMIN = 'Admin'
ROLE_DIRECTOR = 'Director'
ROLE_CFO = 'CFO'
ROLE_STORES = 'Stores'
ROLE_PURCHASE = 'Purchase'
ROLE_PRODUCTION = 'Production'
ROLE_QUALITY = 'Quality'
ROLE_PACKING = 'Packing'
ROLE_ACCOUNTS = 'Accounts'
ROLE_SALES = 'Sales'
ROLE_MAINTENANCE = 'Maintenance'

APPLICATION_ROLES = [
    ROLE_ADMIN, ROLE_DIRECTOR, ROLE_CFO, ROLE_STORES, ROLE_PURCHASE, ROLE_PRODUCTION,
    ROLE_QUALITY, ROLE_PACKING, ROLE_ACCOUNTS, ROLE_SALES, ROLE_MAINTENANCE,
]

# Roles a user may pick for themselves at signup
SELF_ASSIGNABLE_ROLES = [
    role for role in APPLICATION_ROLES if role not in (ROLE_ADMIN, ROLE_DIRECTOR, ROLE_CFO)
]

# Area access used by the frontend navigation (auth/me)
AREA_ROLES = {
    'can_access_gate': [ROLE_STORES, ROLE_PURCHASE, ROLE_PACKING, ROLE_DIRECTOR],
    'can_access_quality': [ROLE_QUALITY, ROLE_PRODUCTION, ROLE_DIRECTOR],
    'can_access_dispatch': [ROLE_PACKING, ROLE_SALES, ROLE_DIRECTOR],
    'can_access_maintenance': [ROLE_MAINTENANCE, ROLE_PRODUCTION, ROLE_DIRECTOR],
    'can_access_finance': [ROLE_ACCOUNTS, ROLE_CFO, ROLE_DIRECTOR],
}


def get_user_roles(user):
    if not user or not user.is_authenticated:
        return []
    return list(user.groups.values_list('name', flat=True))


def is_admin_user(user):
    """
    Check if user is an admin user.
    Returns True if:
    - User is in 'Admin' group, OR
    - User is superuser/staff and not in any application group (fallback)
    """
    user_group_names = get_user_roles(user)

    if ROLE_ADMIN in user_group_names:
        return True

    has_application_group = any(group in user_group_names for group in APPLICATION_ROLES)
    if not has_application_group and (user.is_superuser or user.is_staff):
        return True

    return False


def user_has_role(user, *roles):
    """True if the user holds any of the roles. Admins hold every role."""
    if is_admin_user(user):
        return True
    user_group_names = get_user_roles(user)
    return any(role in user_group_names for role in roles)


class HasRole(BasePermission):
    """Base permission: subclasses list the roles allowed through"""
    roles = ()
    message = 'You do not have the role required for this action.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and user_has_role(request.user, *self.roles))


class IsAdminRole(HasRole):
    roles = (ROLE_ADMIN,)
    message = 'Only administrators can perform this action.'


class IsQualityRole(HasRole):
    roles = (ROLE_QUALITY,)
    message = 'Only Quality users can perform this action.'


class IsStoresRole(HasRole):
    roles = (ROLE_STORES, ROLE_PURCHASE, ROLE_PACKING)
    message = 'Only Stores users can record gate entries.'


class IsAccountsRole(HasRole):
    roles = (ROLE_ACCOUNTS, ROLE_CFO)
    message = 'Only Accounts users can perform this action.'


class IsMaintenanceRole(HasRole):
    roles = (ROLE_MAINTENANCE, ROLE_PRODUCTION)
    message = 'Only Maintenance or Production users can log maintenance.'
