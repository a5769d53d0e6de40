from __future__ import annotations

import pytest

from sdiwire._internal.injector import Injector


@pytest.fixture()
def sdiwire_injector() -> Injector:
    """Create a per-test injector.

    The fixture is function-scoped, so bindings are isolated between tests.
    Override it in a ``conftest.py`` to share pre-bound providers:

    .. code-block:: python

        @pytest.fixture()
        def sdiwire_injector() -> Injector:
            injector = Injector()
            injector.bind("clock", constructor(FrozenClock))
            return injector

    Returns:
        A new ``Injector`` with no bindings.

    """
    return Injector()
