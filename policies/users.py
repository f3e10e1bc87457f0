from entities.user import User, UserUpdate
from policies.field_policy import FieldPolicy, FieldType

# fields clients may change on a user; password and id are never listed
USER_UPDATE_FIELDS = {
    "firstName": FieldType.STRING,
    "lastName": FieldType.STRING,
    "birthYear": FieldType.INTEGER,
}

USER_UPDATE_POLICY = FieldPolicy(User, USER_UPDATE_FIELDS)


def build_user_update_policy() -> FieldPolicy:
    """Policy derived from the UserUpdate model; must match USER_UPDATE_POLICY."""
    return FieldPolicy.from_update_model(User, UserUpdate)
