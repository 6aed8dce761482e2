"""
Spotify playlist host.

Implements OAuth 2.0 + PKCE authentication, ordered playlist reads and
chunked playlist rewrites.
"""

from loguru import logger

from ...provider import ProviderConfig, ProviderState

# Import from submodules
from . import api, auth


def init_provider(config: ProviderConfig) -> ProviderState:
    """Initialize Spotify provider from stored tokens, refreshing if expired.

    Args:
        config: Provider configuration (client credentials, redirect URI)

    Returns:
        ProviderState; authenticated=False means authenticate() is needed
    """
    logger.debug("Initializing Spotify provider")
    state = ProviderState(config=config)

    token_data = auth.load_user_tokens()
    if not token_data:
        logger.debug("No stored Spotify tokens")
        return state

    if not auth.is_token_expired(token_data):
        logger.debug("Stored Spotify token is valid")
        return state.with_authenticated(True).with_cache(token_data=token_data)

    logger.info("Stored Spotify token expired, attempting refresh")
    refreshed = auth.refresh_token(config, token_data)
    if refreshed:
        return state.with_authenticated(True).with_cache(token_data=refreshed)

    logger.warning("Spotify token refresh failed")
    return state


# Re-export authentication functions
authenticate = auth.authenticate

# Re-export API functions
get_playlist_tracks = api.get_playlist_tracks
replace_playlist_order = api.replace_playlist_order


__all__ = [
    "init_provider",
    "authenticate",
    "get_playlist_tracks",
    "replace_playlist_order",
]
