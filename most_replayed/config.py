"""実行時設定"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

logger = logging.getLogger(__name__)

# ===== 内部設定 =====
WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"
DEFAULT_SEGMENT_COUNT = 150  # 返す区間数の上限

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ARGS = ("--no-sandbox", "--disable-setuid-sandbox", "--disable-gpu")

# プレイヤーのセレクタ
HEATMAP_SELECTOR = ".ytp-heat-map-svg"
PROGRESS_BAR_SELECTOR = ".ytp-progress-bar"
VIDEO_LENGTH_ATTRIBUTE = "aria-valuemax"
# ヒートマップSVGの基準線のy座標（山が高いほどyは小さい）
HEATMAP_Y_BASELINE = 100.0

# 広告のセレクタ
AD_SKIP_SELECTORS = (
    ".ytp-ad-skip-button",
    ".ytp-ad-skip-button-modern",
    ".ytp-skip-ad-button",
)
AD_OVERLAY_SELECTORS = (".ytp-ad-player-overlay", ".ytp-ad-player-overlay-layout")
AD_TEXT_SELECTORS = (".ytp-ad-text",)

# 埋め込みJSON
EMBEDDED_DATA_KEY = "frameworkUpdates"
# ====================

ENV_PREFIX = "MOST_REPLAYED_"


@dataclass(frozen=True)
class Settings:
    """ブラウザ操作と抽出のパラメータ"""

    headless: bool = True
    browser_args: tuple[str, ...] = BROWSER_ARGS
    user_agent: str = USER_AGENT
    locale: str = "en-US"
    navigation_timeout_ms: int = 30000
    selector_timeout_ms: int = 5000
    max_retries: int = 3
    ad_max_wait_ms: int = 30000
    ad_poll_interval_ms: int = 2000
    ad_settle_ms: int = 1000
    ad_click_timeout_ms: int = 2000
    ad_skip_selectors: tuple[str, ...] = field(default=AD_SKIP_SELECTORS)
    ad_overlay_selectors: tuple[str, ...] = field(default=AD_OVERLAY_SELECTORS)
    ad_text_selectors: tuple[str, ...] = field(default=AD_TEXT_SELECTORS)

    def watch_url(self, video_id: str) -> str:
        return WATCH_URL_TEMPLATE.format(video_id=video_id)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        環境変数から設定を読み込む

        Args:
            environ: 参照する環境変数（Noneの場合はos.environ）

        Returns:
            Settings
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        return cls(
            headless=_env_bool(env, "HEADLESS", defaults.headless),
            user_agent=env.get(f"{ENV_PREFIX}USER_AGENT") or defaults.user_agent,
            locale=env.get(f"{ENV_PREFIX}LOCALE") or defaults.locale,
            navigation_timeout_ms=_env_int(
                env, "NAVIGATION_TIMEOUT_MS", defaults.navigation_timeout_ms, minimum=1
            ),
            selector_timeout_ms=_env_int(
                env, "SELECTOR_TIMEOUT_MS", defaults.selector_timeout_ms, minimum=1
            ),
            max_retries=_env_int(env, "MAX_RETRIES", defaults.max_retries),
            ad_max_wait_ms=_env_int(env, "AD_MAX_WAIT_MS", defaults.ad_max_wait_ms),
            ad_poll_interval_ms=_env_int(
                env, "AD_POLL_INTERVAL_MS", defaults.ad_poll_interval_ms, minimum=1
            ),
        )


def _env_int(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    """整数の環境変数を読む。minimum未満や数値でない値は既定値に戻す"""
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s%s が不正な値です: %r（既定値 %d を使用）", ENV_PREFIX, name, raw, default)
        return default
    # Playwrightではtimeout=0が無期限になるため、タイムアウト系は1以上に制限する
    if value < minimum:
        logger.warning(
            "%s%s は%d以上である必要があります: %r（既定値 %d を使用）",
            ENV_PREFIX,
            name,
            minimum,
            raw,
            default,
        )
        return default
    return value


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    logger.warning("%s%s が不正な値です: %r", ENV_PREFIX, name, raw)
    return default
