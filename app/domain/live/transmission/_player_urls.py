from urllib.parse import quote, urlencode

from app.app_config import AppEnvironConfig

from .transmission_models import PlayerUrls


def build_player_urls(login: str, playlist_id: int, app_config: AppEnvironConfig) -> PlayerUrls:
    """Playback endpoints for a started transmission.

    The iframe host follows `APP_ENV` (production vs development player); the
    direct URL is the HLS playlist on the streaming origin, keyed by login only.
    """
    query = urlencode(
        {
            "login": login,
            "playlist": playlist_id,
            "player": 1,
            "contador": "true",
            "compartilhamento": "true",
        }
    )
    iframe = f"{app_config.player_base_url.rstrip('/')}{app_config.PLAYER_IFRAME_PATH}?{query}"

    safe_login = quote(login, safe="")
    direct = f"{app_config.DIRECT_STREAM_BASE_URL.rstrip('/')}/{safe_login}/{safe_login}/playlist.m3u8"

    return PlayerUrls(iframe=iframe, direct=direct)
