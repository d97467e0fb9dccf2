"""Process-wide Localization slots.

Two slots exist: the default instance, created lazily by get_localization()
(or explicitly by create_localization()), and the installed instance set by
install(). Module-level t() prefers the installed instance.

Thread Safety:
    Slot reads and writes are serialized by a module lock. Translation
    itself runs outside the lock.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from dotlex.localization.orchestrator import Localization

if TYPE_CHECKING:
    from dotlex.localization.types import TranslationKey, TranslationParams

__all__ = [
    "create_localization",
    "get_installed_localization",
    "get_localization",
    "install",
    "is_installed",
    "set_default_localization",
    "t",
    "uninstall",
]

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_default: Localization | None = None
_installed: Localization | None = None


def create_localization(**options: Any) -> Localization:
    """Create a Localization and make it the default instance.

    Keyword arguments are passed to Localization(); an existing default
    instance is replaced.
    """
    global _default  # noqa: PLW0603
    l10n = Localization(**options)
    with _lock:
        _default = l10n
    return l10n


def get_localization() -> Localization:
    """Return the default instance, creating one with default options on first use."""
    global _default  # noqa: PLW0603
    with _lock:
        if _default is None:
            _default = Localization()
            logger.debug("Created default localization instance")
        return _default


def set_default_localization(l10n: Localization | None) -> None:
    """Replace (or with None, reset) the default instance."""
    global _default  # noqa: PLW0603
    with _lock:
        _default = l10n


def install(l10n: Localization) -> None:
    """Register l10n as the installed instance used by t()."""
    global _installed  # noqa: PLW0603
    with _lock:
        _installed = l10n
    logger.debug("Installed %r", l10n)


def uninstall() -> None:
    """Clear the installed instance slot."""
    global _installed  # noqa: PLW0603
    with _lock:
        _installed = None


def get_installed_localization() -> Localization | None:
    """Return the installed instance, or None."""
    with _lock:
        return _installed


def is_installed() -> bool:
    """Check whether an instance is installed."""
    with _lock:
        return _installed is not None


def t(key: TranslationKey, params: TranslationParams | None = None) -> str:
    """Translate through the installed instance, else the default instance.

    Example:
        >>> create_localization(translations={"zh-CN": {"ok": "确定"}})
        Localization(locale='zh-CN', locales=('zh-CN', 'en-US'), loaded=1)
        >>> t("ok")
        '确定'
    """
    with _lock:
        target = _installed
    if target is None:
        target = get_localization()
    return target.translate(key, params)
