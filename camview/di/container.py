# Local application imports
from .base_container import BaseContainer
from .providers import (
    CameraProvider,
    DatabaseProvider,
    OnvifProvider,
    RepositoryProvider,
    SettingsProvider,
    StreamingProvider,
    VisionProvider,
)


class DIContainer(BaseContainer):
    """
    Main dependency injection container.
    Composes all providers in the correct order.

    Registration order is important:
    1. Database connections (DatabaseProvider)
    2. Repositories (RepositoryProvider) - depends on database
    3. Shared services (OnvifProvider, StreamingProvider) - depend on repositories
    4. Use cases (CameraProvider, SettingsProvider, VisionProvider)
    """

    def __init__(self) -> None:
        super().__init__()
        self.setup()

    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: database → repositories → services → use cases
        """
        DatabaseProvider.register(self)
        RepositoryProvider.register(self)

        OnvifProvider.register(self)
        StreamingProvider.register(self)

        CameraProvider.register(self)
        SettingsProvider.register(self)
        VisionProvider.register(self)


# Global container instance (singleton pattern)
_container: DIContainer | None = None


def get_container() -> DIContainer:
    """
    Get the global DI container instance (singleton pattern)

    Returns:
        DIContainer instance with all dependencies registered
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def reset_container() -> None:
    """Drop the global container (used on shutdown and in tests)."""
    global _container
    _container = None
