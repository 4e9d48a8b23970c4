import abc

class Notifier(abc.ABC):
    """Abstract base class for delivering a bin notification."""

    @abc.abstractmethod
    def send(self, message: str) -> None:
        """
        Delivers a single plain-text message.

        Raises:
            DeliveryError: if the message could not be delivered.
        """
        pass
