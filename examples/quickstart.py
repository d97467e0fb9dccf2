"""Quickstart example for dotlex.

Demonstrates dotted-key lookup, default-locale fallback, interpolation,
missing-key policies, locale switching and formatting.

Python 3.13+.
"""

from __future__ import annotations

import logging
import time

from dotlex import CacheConfig, FallbackInfo, Localization

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def on_fallback(info: FallbackInfo) -> None:
    print(f"  [fallback] {info.key}: {info.requested_locale} -> {info.resolved_locale}")


l10n = Localization(
    default_locale="zh-CN",
    locales=["zh-CN", "en-US"],
    translations={
        "zh-CN": {
            "greeting": "你好",
            "welcome": "欢迎 {name}",
            "nav": {"home": "首页", "about": "关于我们"},
        },
        "en-US": {
            "greeting": "Hello",
            "welcome": "Welcome {name}",
            "nav": {"home": "Home"},
        },
    },
    cache=CacheConfig(size=100),
    event_target=None,
    on_fallback=on_fallback,
)

# Example 1: Lookup and interpolation
print("=" * 50)
print("Example 1: Lookup and Interpolation")
print("=" * 50)
print(l10n.t("greeting"))
# Output: 你好
print(l10n.t("welcome", {"name": "张三"}))
# Output: 欢迎 张三
print(l10n.t("nav.home"))
# Output: 首页

# Example 2: Switching locale with fallback
print("\n" + "=" * 50)
print("Example 2: Locale Switching and Fallback")
print("=" * 50)
unsubscribe = l10n.on_change(lambda locale: print(f"  [listener] locale is now {locale}"))
print(l10n.set_locale("en-US"))
# Output: True
print(l10n.t("nav.home"))
# Output: Home
print(l10n.t("nav.about"))
# Output: 关于我们 (from zh-CN)
print(l10n.set_locale("fr-FR"))
# Output: False
unsubscribe()

# Example 3: Missing keys
print("\n" + "=" * 50)
print("Example 3: Missing Keys")
print("=" * 50)
print(l10n.t("does.not.exist"))
# Output: does.not.exist
print(repr(Localization(fallback_behavior="empty", event_target=None).t("does.not.exist")))
# Output: ''

# Example 4: Formatting
print("\n" + "=" * 50)
print("Example 4: Formatting")
print("=" * 50)
print(l10n.format_number(1234567.89))
# Output: 1,234,567.89
print(l10n.format_number(1234.5, decimals=0))
# Output: 1,235
print(l10n.format_currency(99.9))
# Output: $99.90
print(l10n.format_relative(time.time() - 300))
# Output: 5 minutes ago

# Example 5: Cache statistics
print("\n" + "=" * 50)
print("Example 5: Cache Statistics")
print("=" * 50)
for _ in range(3):
    l10n.t("greeting")
print(l10n.get_cache_stats())
