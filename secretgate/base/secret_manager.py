"""Secret Manager service blueprint."""

from abc import ABC, abstractmethod

from secretgate.base.config import Secret
from secretgate.base.models import OperationResponse, SecretResponse, ValidationResponse


class SecretManagerBlueprint(ABC):
    """Abstract interface for the operations the handler dispatches to.

    Store failures are reported inside the returned response objects rather
    than raised, with the exception of :meth:`fetch_secret`, which has no
    failure shape.
    """

    @abstractmethod
    def connect(self, name: str) -> ValidationResponse:
        """Check that the store is reachable and the credentials are accepted.

        Args:
            name: Secret name to look up; it need not exist.
        """
        pass

    @abstractmethod
    def validate_reference(self, name: str) -> ValidationResponse:
        """Check that a ``name#key.path`` reference resolves to a value.

        Args:
            name: Secret reference.
        """
        pass

    @abstractmethod
    def fetch_secret(self, secret: Secret) -> SecretResponse:
        """Resolve a secret reference to its value.

        Args:
            secret: Secret whose name may carry a ``#key.path`` suffix.

        Raises:
            SecretFetchError: If the secret cannot be read.
            SecretDecodeError: If base64 decoding was requested and fails.
        """
        pass

    @abstractmethod
    def create_secret(self, secret: Secret) -> OperationResponse:
        """Create a new secret under the configured prefix."""
        pass

    @abstractmethod
    def update_secret(self, secret: Secret) -> OperationResponse:
        """Overwrite the value of a secret under the configured prefix."""
        pass

    @abstractmethod
    def upsert_secret(
        self, secret: Secret, existing_secret: Secret | None = None
    ) -> OperationResponse:
        """Create or update a secret, then drop the previous one if renamed.

        Args:
            secret: Secret to write.
            existing_secret: Secret the value previously lived under.
        """
        pass

    @abstractmethod
    def rename_secret(self, secret: Secret, existing_secret: Secret) -> OperationResponse:
        """Move the value of *existing_secret* to *secret*."""
        pass

    @abstractmethod
    def delete_secret(self, secret: Secret) -> OperationResponse:
        """Delete a secret without a recovery window."""
        pass
