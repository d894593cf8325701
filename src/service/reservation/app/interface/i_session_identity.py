from abc import ABC, abstractmethod
from typing import Optional


class ISessionIdentity(ABC):
    """
    Supplies the caller credential used for reservation ownership checks.

    The core only needs the resulting session id to be stable for one checkout flow and
    unguessable; how it travels (cookie, header) is up to the transport.
    """

    @abstractmethod
    def issue(self) -> tuple[str, str]:
        """
        Create a new session.

        Returns:
            (session_id, credential) where credential is the signed value handed to the client
        """
        pass

    @abstractmethod
    def verify(self, credential: Optional[str]) -> Optional[str]:
        """
        Returns:
            The session id carried by a valid credential, None when missing or tampered
        """
        pass
