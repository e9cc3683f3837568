"""Users app package.

Defines the custom user model with its tenancy role (tenant, owner or
admin) and the account deletion cascade. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout the
project.
"""
