"""
Projection from the server's public identity to the client identity.

Every path that puts a user into client state goes through
project_identity, so the stored shape is always the same minimal one.
"""

from typing import Any, Iterable, Mapping, Union

from modules.auth.models import PublicIdentity

from .models import CurrentUserIdentity

IDENTITY_FIELDS = tuple(CurrentUserIdentity.model_fields)

UserLike = Union[PublicIdentity, CurrentUserIdentity, Mapping[str, Any]]


def project_identity(user: UserLike) -> CurrentUserIdentity:
    """
    Extract the identity fields from a public user.

    Accepts a PublicIdentity, an existing projection, or a wire mapping
    (camelCase or snake_case keys). A missing display name or avatar
    becomes None.

    Example:
        identity = project_identity(session.user)
    """
    if isinstance(user, CurrentUserIdentity):
        return user
    if isinstance(user, Mapping):
        # Extra keys (email, timestamps, ...) are dropped by validation
        return CurrentUserIdentity.model_validate(dict(user))
    return CurrentUserIdentity.model_validate(
        {field: getattr(user, field) for field in IDENTITY_FIELDS}
    )


def _field_name(name: str) -> str:
    """Map a camelCase wire name to its snake_case field name."""
    for field, info in CurrentUserIdentity.model_fields.items():
        if name in (field, info.alias):
            return field
    return name


def create_identity_update(
    updated_user: PublicIdentity,
    changed_fields: Iterable[str],
) -> dict[str, Any]:
    """
    Build a partial identity update from a profile mutation result.

    Only changed fields that belong to the identity projection are kept;
    anything else the mutation changed is not global state.

    Args:
        updated_user: The user as returned by the mutation
        changed_fields: Names of the fields the mutation changed, in
            either camelCase or snake_case

    Returns:
        Mapping of snake_case identity field to new value
    """
    update: dict[str, Any] = {}
    for name in changed_fields:
        field = _field_name(name)
        if field in IDENTITY_FIELDS:
            update[field] = getattr(updated_user, field)
    return update


def apply_identity_update(
    identity: CurrentUserIdentity,
    update: Mapping[str, Any],
) -> CurrentUserIdentity:
    """Return a new projection with the update applied (unknown keys ignored)."""
    changes = {
        _field_name(key): value
        for key, value in update.items()
        if _field_name(key) in IDENTITY_FIELDS
    }
    if not changes:
        return identity
    return CurrentUserIdentity.model_validate({**identity.model_dump(), **changes})
