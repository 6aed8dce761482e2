"""
Providers: the Spotify playlist host and the GetSongBPM key/tempo lookup.
"""
