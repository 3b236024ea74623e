"""Import every command module so ``@register_service`` populates the registry."""

from relcore.services import (  # noqa: F401
    accounts,
    contact_information,
    contacts,
    reference_data,
    users,
    vaults,
)
