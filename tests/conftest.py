from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def reset_registry() -> Iterator[None]:
    """Reset module-level binding state before each test."""
    import mapbind.registry as registry

    registry._REGISTRY.clear()  # pyright: ignore[reportPrivateUsage]

    yield

    registry._REGISTRY.clear()  # pyright: ignore[reportPrivateUsage]
