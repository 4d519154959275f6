"""Keypair ownership for the two account roles."""

import structlog
from stellar_sdk import Keypair

from liquidity.errors import ActionUnavailable, KeypairGenerationError
from liquidity.models.lifecycle import Role

logger = structlog.get_logger()


class IdentityProvider:
    """Generates and holds one keypair per role.

    Keypairs live only in memory and are never logged beyond their public key.
    """

    def __init__(self) -> None:
        self._keypairs: dict[Role, Keypair] = {}

    def create_role(self, role: Role) -> Keypair:
        """Generate a fresh random keypair for ``role``, replacing any previous one.

        Raises:
            KeypairGenerationError: If the entropy source fails
        """
        try:
            keypair = Keypair.random()
        except (OSError, NotImplementedError) as err:
            raise KeypairGenerationError(f"Could not generate keypair for {role.value}") from err

        self._keypairs[role] = keypair
        logger.info("keypair_created", role=role.value, public_key=keypair.public_key)
        return keypair

    def keypair(self, role: Role) -> Keypair:
        """Return the keypair for ``role``.

        Raises:
            ActionUnavailable: If the role has not been created
        """
        try:
            return self._keypairs[role]
        except KeyError:
            raise ActionUnavailable(role.value, "account has not been created") from None

    def public_key(self, role: Role) -> str | None:
        """Public key for ``role``, or None if not created."""
        keypair = self._keypairs.get(role)
        return keypair.public_key if keypair is not None else None

    def has_role(self, role: Role) -> bool:
        return role in self._keypairs

    def reset(self) -> None:
        """Discard all keypairs."""
        self._keypairs.clear()
