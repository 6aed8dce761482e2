"""Tests for Spotify playlist reads and chunked write-back."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, call, patch

import pytest
import requests

from camelot_sort.domain.library.provider import ProviderConfig, ProviderState
from camelot_sort.domain.library.providers.spotify import api
from camelot_sort.errors import PlaylistReadError, WriteBackError

REQUESTS = "camelot_sort.domain.library.providers.spotify.api.requests"
URL = "https://api.spotify.com/v1/playlists/pl1/tracks"


def _state(authenticated=True) -> ProviderState:
    state = ProviderState(config=ProviderConfig(name="spotify", client_id="id", client_secret="s"))
    if not authenticated:
        return state
    token = {
        "access_token": "tok",
        "refresh_token": "ref",
        "expires_at": (datetime.now() + timedelta(hours=1)).isoformat(),
    }
    return state.with_authenticated(True).with_cache(token_data=token)


def _response(payload=None, status=200):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


def _item(track_id, name="Song", artists=("Drake",), duration_ms=200000, **extra):
    track = {
        "id": track_id,
        "name": name,
        "type": "track",
        "artists": [{"name": a} for a in artists],
        "duration_ms": duration_ms,
    }
    track.update(extra)
    return {"track": track, "is_local": False}


class TestGetPlaylistTracks:
    """Tests for get_playlist_tracks."""

    def test_follows_pagination(self) -> None:
        page1 = {"items": [_item("a"), _item("b")], "next": f"{URL}?offset=2&limit=2"}
        page2 = {"items": [_item("c", name="Other", artists=("X", "Y"))], "next": None}

        with patch(f"{REQUESTS}.get", side_effect=[_response(page1), _response(page2)]) as mock_get:
            _, tracks, _ = api.get_playlist_tracks(_state(), "pl1")

        assert [t.track_id for t in tracks] == ["a", "b", "c"]
        assert [t.position for t in tracks] == [0, 1, 2]
        assert tracks[2].artist == "X"
        assert tracks[2].title == "Other"
        assert tracks[0].duration_ms == 200000

        first, second = mock_get.call_args_list
        assert first[0][0] == URL
        assert first[1]["params"] == {"limit": 100}
        assert first[1]["headers"] == {"Authorization": "Bearer tok"}
        assert second[0][0] == f"{URL}?offset=2&limit=2"
        assert second[1]["params"] == {}

    def test_skips_local_removed_and_episodes(self) -> None:
        items = [
            _item("a"),
            {"track": None},
            {"track": {"id": None, "name": "Local", "is_local": True}, "is_local": True},
            _item("ep", type="episode"),
            _item("b"),
        ]
        with patch(f"{REQUESTS}.get", return_value=_response({"items": items, "next": None})):
            _, tracks, skipped = api.get_playlist_tracks(_state(), "spotify:playlist:pl1")

        assert [(t.track_id, t.position) for t in tracks] == [("a", 0), ("b", 1)]
        assert skipped == 3

    def test_skipped_items_counted_across_pages(self) -> None:
        """A local file between two tracks is reported, not silently dropped."""
        local = {"track": {"id": None, "name": "Demo.mp3", "is_local": True}, "is_local": True}
        page1 = {"items": [_item("b"), local], "next": f"{URL}?offset=2"}
        page2 = {"items": [_item("a")], "next": None}

        with patch(f"{REQUESTS}.get", side_effect=[_response(page1), _response(page2)]):
            _, tracks, skipped = api.get_playlist_tracks(_state(), "pl1")

        assert [t.track_id for t in tracks] == ["b", "a"]
        assert skipped == 1

    def test_title_kept_verbatim(self) -> None:
        """Titles are not trimmed; matching compares the original text."""
        items = [_item("a", name=" Song ")]
        with patch(f"{REQUESTS}.get", return_value=_response({"items": items, "next": None})):
            _, tracks, _ = api.get_playlist_tracks(_state(), "pl1")

        assert tracks[0].title == " Song "

    def test_missing_artist_is_unknown(self) -> None:
        items = [_item("a", artists=())]
        with patch(f"{REQUESTS}.get", return_value=_response({"items": items, "next": None})):
            _, tracks, _ = api.get_playlist_tracks(_state(), "pl1")

        assert tracks[0].artist == "Unknown"

    def test_not_authenticated(self) -> None:
        with patch(f"{REQUESTS}.get") as mock_get:
            with pytest.raises(PlaylistReadError):
                api.get_playlist_tracks(_state(authenticated=False), "pl1")
        mock_get.assert_not_called()

    def test_not_found(self) -> None:
        with patch(f"{REQUESTS}.get", return_value=_response(status=404)):
            with pytest.raises(PlaylistReadError, match="not found"):
                api.get_playlist_tracks(_state(), "pl1")

    def test_network_error(self) -> None:
        with patch(f"{REQUESTS}.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(PlaylistReadError):
                api.get_playlist_tracks(_state(), "pl1")

    def test_expired_token_refreshed(self) -> None:
        state = _state().with_cache(
            token_data={"access_token": "old", "refresh_token": "ref", "expires_at": "2000-01-01T00:00:00"}
        )
        fresh = {
            "access_token": "new",
            "refresh_token": "ref",
            "expires_at": (datetime.now() + timedelta(hours=1)).isoformat(),
        }
        page = {"items": [], "next": None}

        with patch(
            "camelot_sort.domain.library.providers.spotify.auth.refresh_token", return_value=fresh
        ) as mock_refresh, patch(f"{REQUESTS}.get", return_value=_response(page)) as mock_get:
            new_state, tracks, _ = api.get_playlist_tracks(state, "pl1")

        mock_refresh.assert_called_once()
        assert new_state.cache["token_data"]["access_token"] == "new"
        assert mock_get.call_args[1]["headers"] == {"Authorization": "Bearer new"}
        assert tracks == []


class TestReplacePlaylistOrder:
    """Tests for replace_playlist_order chunking."""

    def test_chunks_250_tracks(self) -> None:
        """250 tracks -> PUT 100, POST 100, POST 50, in order."""
        ids = [f"t{i}" for i in range(250)]

        with patch(f"{REQUESTS}.put", return_value=_response({})) as mock_put, patch(
            f"{REQUESTS}.post", return_value=_response({})
        ) as mock_post:
            api.replace_playlist_order(_state(), "pl1", ids)

        mock_put.assert_called_once()
        put_uris = mock_put.call_args[1]["json"]["uris"]
        assert put_uris == [f"spotify:track:t{i}" for i in range(100)]

        assert mock_post.call_count == 2
        post_uris = [c[1]["json"]["uris"] for c in mock_post.call_args_list]
        assert post_uris[0] == [f"spotify:track:t{i}" for i in range(100, 200)]
        assert post_uris[1] == [f"spotify:track:t{i}" for i in range(200, 250)]
        assert mock_put.call_args[0][0] == URL

    def test_single_chunk_only_put(self) -> None:
        with patch(f"{REQUESTS}.put", return_value=_response({})) as mock_put, patch(
            f"{REQUESTS}.post"
        ) as mock_post:
            api.replace_playlist_order(_state(), "pl1", ["a", "spotify:track:b"])

        assert mock_put.call_args[1]["json"] == {"uris": ["spotify:track:a", "spotify:track:b"]}
        mock_post.assert_not_called()

    def test_custom_chunk_size(self) -> None:
        with patch(f"{REQUESTS}.put", return_value=_response({})), patch(
            f"{REQUESTS}.post", return_value=_response({})
        ) as mock_post:
            api.replace_playlist_order(_state(), "pl1", ["a", "b", "c"], chunk_size=1)

        assert mock_post.call_args_list == [
            call(URL, json={"uris": ["spotify:track:b"]}, headers={"Authorization": "Bearer tok"}, timeout=30),
            call(URL, json={"uris": ["spotify:track:c"]}, headers={"Authorization": "Bearer tok"}, timeout=30),
        ]

    @pytest.mark.parametrize("chunk_size", [0, 101])
    def test_invalid_chunk_size(self, chunk_size) -> None:
        with pytest.raises(ValueError):
            api.replace_playlist_order(_state(), "pl1", ["a"], chunk_size=chunk_size)

    def test_empty_is_noop(self) -> None:
        with patch(f"{REQUESTS}.put") as mock_put:
            api.replace_playlist_order(_state(), "pl1", [])
        mock_put.assert_not_called()

    def test_rejected_write(self) -> None:
        with patch(f"{REQUESTS}.put", return_value=_response(status=403)):
            with pytest.raises(WriteBackError) as exc_info:
                api.replace_playlist_order(_state(), "pl1", ["a"])

        assert exc_info.value.status_code == 403
        assert exc_info.value.playlist_id == "pl1"

    def test_failure_on_later_chunk(self) -> None:
        ids = [f"t{i}" for i in range(150)]
        with patch(f"{REQUESTS}.put", return_value=_response({})), patch(
            f"{REQUESTS}.post", return_value=_response(status=500)
        ):
            with pytest.raises(WriteBackError):
                api.replace_playlist_order(_state(), "pl1", ids)

    def test_not_authenticated(self) -> None:
        with pytest.raises(WriteBackError):
            api.replace_playlist_order(_state(authenticated=False), "pl1", ["a"])


class TestChunked:
    def test_chunked(self) -> None:
        assert api.chunked(["a", "b", "c"], 2) == [["a", "b"], ["c"]]
        assert api.chunked([], 2) == []
