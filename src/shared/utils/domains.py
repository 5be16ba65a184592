"""Domain activation shared by the CLI and the test suite."""

from shared.utils.logging import configure_logging

_initialized = set()
_logging_configured = False


def initialize(domain):
    """Initialize ``domain`` once per process and return it.

    Logging is configured on the first call, before any domain starts up.
    """
    global _logging_configured
    if not _logging_configured:
        configure_logging()
        _logging_configured = True

    if domain.name not in _initialized:
        domain.init()
        _initialized.add(domain.name)
    return domain


def get_domain(name):
    """Import and initialize a bounded context's domain by name."""
    if name == "cart":
        from cart.domain import cart

        return initialize(cart)
    elif name == "menu":
        from menu.domain import menu

        return initialize(menu)
    elif name == "identity":
        from identity.domain import identity

        return initialize(identity)
    else:
        raise ValueError(f"Unknown domain: {name}")
